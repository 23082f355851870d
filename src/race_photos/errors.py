"""Error taxonomy shared by services and the HTTP layer."""


class MarketplaceError(Exception):
    """Base error carrying an HTTP status and a client-safe message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(MarketplaceError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401
    default_message = "Unauthorized"


class BadRequest(MarketplaceError):
    """Raised for malformed input or missing referenced rows."""

    status_code = 400
    default_message = "Bad request"


class VerificationFailed(BadRequest):
    """Raised when a webhook signature does not verify."""

    default_message = "Webhook error"


class InternalError(MarketplaceError):
    """Raised for unexpected upstream failures; details stay in the logs."""


class NotFound(MarketplaceError):
    """Raised when a requested public resource does not exist."""

    status_code = 404
    default_message = "Not found"
