# Pydantic schemas package
from notedesk.backend.schemas.base import (
    ApiResponse,
    ErrorDetail,
    ErrorResponse,
    ResponseMetadata,
)

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "ResponseMetadata",
]
