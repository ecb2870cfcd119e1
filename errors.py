# errors.py

from http import HTTPStatus


def http_error_body(status_code: int, reason=None) -> str:
    """
    Render an error body: the status text on the first line, then `<code>:<reason>` when a reason is given.
    """
    body = f"{HTTPStatus(status_code).phrase}\n"
    if reason is not None:
        body += f"{status_code}:{reason}\n"
    return body


class ConfigError(Exception):
    """Configuration could not be read, parsed or validated."""


class WebhookError(Exception):
    """Base class for errors that end a request with an HTTP error response."""

    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthError(WebhookError):
    status_code = 403


class UnsupportedEventError(WebhookError):
    def __init__(self, event_type):
        super().__init__(f"unhandled event {event_type or ''}".rstrip())
        self.event_type = event_type


class DecodeError(WebhookError):
    pass
