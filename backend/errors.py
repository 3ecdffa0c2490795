"""Error types raised by the storefront services.

Each carries the HTTP status it maps to; ``main.py`` turns them into
``{"error": message}`` responses.
"""


class StoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    status_code = 400


class Unauthorized(StoreError):
    status_code = 401


class NotFound(StoreError):
    status_code = 404


class UpstreamError(StoreError):
    """The image host rejected or failed a call."""

    status_code = 500
