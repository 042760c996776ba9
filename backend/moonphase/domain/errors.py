from __future__ import annotations

from typing import Optional


class MoonDataError(Exception):
    """Base class for every failure raised by the moon data layer."""


class HttpError(MoonDataError):
    def __init__(self, status_code: int, reason: Optional[str] = None) -> None:
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"HTTP Error: {status_code} - {self.reason}".rstrip(" -"))


class ApiError(MoonDataError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"API Error: {message}")


class NoDataError(MoonDataError):
    """Raised when every unit of a batch fetch failed."""


class FetchError(MoonDataError):
    """Wraps the failure of one branch of the aggregate fetch."""

    def __init__(self, branch: str, cause: BaseException) -> None:
        self.branch = branch
        self.cause = cause
        super().__init__(f"Failed to get {branch} moon data: {cause}")
