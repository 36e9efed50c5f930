from typing import Optional


# ===========================
# Base Error
# ===========================
class DesidubError(Exception):

    status: int = 500

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


# ===========================
# Upstream Fetch Failure
# ===========================
class FetchError(DesidubError):

    def __init__(self, url: str, status: int):
        super().__init__(f"Failed to fetch {url}", status)
        self.url = url


# ===========================
# Handler Failure
# ===========================
class HandlerFailure(DesidubError):

    @classmethod
    def from_exception(cls, error: Exception) -> "HandlerFailure":
        status = getattr(error, "status", None) or 500
        message = str(error) or "Internal Server Error"
        return cls(message, status)
