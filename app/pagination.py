"""Page/size to offset conversion shared by the paginated queries"""

from app.errors import InvalidArgumentError


def page_offset(page_size: int, page_number: int) -> int:
    """Offset for a 1-based page; rejects page_number < 1 and page_size < 1"""
    if page_number < 1:
        raise InvalidArgumentError("Page number must be greater than 0.")
    if page_size < 1:
        raise InvalidArgumentError("Page size must be greater than 0.")
    return (page_number - 1) * page_size
