"""Ed25519 verification of incoming interaction requests"""

from typing import Optional

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def verify_signature(
    public_key: str,
    signature: Optional[str],
    timestamp: Optional[str],
    body: bytes,
) -> bool:
    """True when signature is the application's signature over timestamp + body"""
    if not public_key or not signature or not timestamp:
        return False
    try:
        verify_key = VerifyKey(bytes.fromhex(public_key))
        verify_key.verify(timestamp.encode() + body, bytes.fromhex(signature))
    except (BadSignatureError, ValueError):
        return False
    return True
