"""Application error types."""


class ShelfScoreError(Exception):
    """Base error with a user-facing message and recovery hint."""

    status_code = 500
    message = "Something went wrong"
    recovery_suggestion: str | None = None

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidBarcodeError(ShelfScoreError):
    status_code = 400
    message = "Invalid barcode format"
    recovery_suggestion = "Make sure the barcode is clearly visible."


class ProductNotFoundError(ShelfScoreError):
    status_code = 404
    message = "Product not found"
    recovery_suggestion = (
        "This product isn't in the Open Food Facts database yet. "
        "Try scanning a different product."
    )


class RateLimitedError(ShelfScoreError):
    status_code = 429
    message = "Too many requests. Please try again shortly."
    recovery_suggestion = "Please wait a moment before scanning another product."


class UpstreamUnavailableError(ShelfScoreError):
    """Raised when an upstream API fails and no cached copy exists."""

    status_code = 502
    message = "Network error"
    recovery_suggestion = "Check your internet connection and try again."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(f"Network error: {detail}" if detail else None)


class RecipeNotFoundError(ShelfScoreError):
    status_code = 404
    message = "Recipe not found"


class GroceryItemNotFoundError(ShelfScoreError):
    status_code = 404
    message = "Grocery item not found"


class UnknownScoringProfileError(ShelfScoreError):
    """Raised when settings name a scoring profile that does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown scoring profile: {name!r}")
