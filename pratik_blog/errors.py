class BlogError(RuntimeError):
    """Base class for errors raised by the blog client."""


class DraftValidationError(BlogError):
    """Raised when a post draft is missing required fields."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []
