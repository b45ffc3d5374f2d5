"""Custom exception hierarchy for the webhook forwarder."""


class ProxyError(Exception):
    """Base exception for all forwarder errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class ForwardError(ProxyError):
    """Raised by a pipeline stage to end the request with an error response.

    Attributes:
        status_code: HTTP status returned to the caller
        error_code: Machine-readable code placed in the ``error`` field
        details: Optional human-readable detail string
    """

    status_code = 500
    error_code = "internal_error"

    def __init__(self, details: str | None = None) -> None:
        super().__init__(details or self.error_code)
        self.details = details


class InvalidApiKey(ForwardError):
    """The x-api-key header is missing or does not match."""

    status_code = 401
    error_code = "invalid_api_key"


class EmptyBody(ForwardError):
    """A non-GET request arrived without a body."""

    status_code = 400
    error_code = "empty_body"


class InvalidJSON(ForwardError):
    """Request body is not valid JSON."""

    status_code = 400
    error_code = "invalid_json"


class MissingWebhookURL(ForwardError, ConfigurationError):
    """No base webhook URL is configured."""

    status_code = 500
    error_code = "missing_n8n_webhook_env"


class UpstreamError(ProxyError):
    """Raised when the upstream call itself fails.

    Attributes:
        message: Error message
        url: Destination URL of the failed call
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url
