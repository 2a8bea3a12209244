from __future__ import annotations

from typing import Dict, Optional


class JsonShareError(Exception):
    """
    Base error for every rejection the API reports to a caller.

    Subclasses carry the HTTP status and the machine-readable kind that ends up
    in the `error` field of the response body.
    """

    status_code: int = 500
    code: str = "InternalError"
    default_detail: str = "Server error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.code, "detail": self.detail}


class MissingField(JsonShareError):
    status_code = 400
    code = "MissingField"
    default_detail = "Missing file, fileName, or authorName"


class UnsupportedMediaType(JsonShareError):
    status_code = 400
    code = "UnsupportedMediaType"
    default_detail = "Only JSON files are allowed"


class InvalidJson(JsonShareError):
    status_code = 400
    code = "InvalidJson"
    default_detail = "Invalid JSON file"


class PayloadTooLarge(JsonShareError):
    status_code = 413
    code = "PayloadTooLarge"
    default_detail = "File exceeds the upload size limit"


class StorageFailure(JsonShareError):
    status_code = 500
    code = "StorageFailure"
    default_detail = "Storage backend error"


class NotFound(JsonShareError):
    status_code = 404
    code = "NotFound"
    default_detail = "File not found"


class BotDetected(JsonShareError):
    status_code = 403
    code = "BotDetected"
    default_detail = "Bot detected. Access denied."


class RateLimited(JsonShareError):
    status_code = 429
    code = "RateLimited"
    default_detail = "Too many requests, please try again later."

    def __init__(self, detail: Optional[str] = None, retry_after: int = 0) -> None:
        super().__init__(detail)
        self.retry_after = retry_after

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        if self.retry_after > 0:
            return {"Retry-After": str(self.retry_after)}
        return None
