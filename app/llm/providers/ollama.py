"""Ollama local LLM provider"""

from typing import Optional
import httpx
import structlog

from app.config import settings
from app.errors import AIServiceError
from app.schemas.llm import OllamaGenerateRequest, OllamaGenerateResponse
from app.llm.providers.base import BaseTextProvider

logger = structlog.get_logger()

EMPTY_RESPONSE_FALLBACK = "I couldn't generate a summary at this time."


class OllamaProvider(BaseTextProvider):
    """Ollama /api/generate implementation"""
    
    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(model or settings.ollama_model)
        self.base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.ollama_timeout_seconds
        self._transport = transport
    
    async def generate_response(self, prompt: str) -> str:
        """Generate a single non-streamed completion"""
        payload = OllamaGenerateRequest(model=self.model, prompt=prompt, stream=False)
        
        logger.info("Sending prompt to Ollama", model=self.model, base_url=self.base_url)
        
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/api/generate",
                    json=payload.model_dump(),
                )
                response.raise_for_status()
                data = OllamaGenerateResponse.model_validate(response.json())
        except httpx.TimeoutException as e:
            logger.error("Request to Ollama timed out", base_url=self.base_url, exc_info=True)
            raise AIServiceError("AI service request timed out. Please try again.") from e
        except httpx.HTTPError as e:
            logger.error("HTTP error while communicating with Ollama", base_url=self.base_url, exc_info=True)
            raise AIServiceError(f"Failed to communicate with AI service: {e}") from e
        except Exception as e:
            logger.error("Unexpected error while communicating with Ollama", exc_info=True)
            raise AIServiceError(f"An unexpected error occurred: {e}") from e
        
        if data.response is None:
            logger.warning("Ollama returned empty response", model=self.model)
            return EMPTY_RESPONSE_FALLBACK
        
        logger.info("Received response from Ollama", content_length=len(data.response))
        return data.response
