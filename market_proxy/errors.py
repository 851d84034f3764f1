from typing import Optional


class GatewayError(Exception):
    """Base for every failure the proxy reports to its callers as ``{"error": ...}``."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingParameter(GatewayError):
    status_code = 400


class InvalidParameter(GatewayError):
    status_code = 400


class ConfigurationError(GatewayError):
    status_code = 500


class UpstreamError(GatewayError):
    """Provider rejected the request (HTTP error) or flagged it in the payload."""

    status_code = 502


class NotFound(GatewayError):
    status_code = 404


class FetchFailed(GatewayError):
    status_code = 500
