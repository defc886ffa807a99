class ReviewClientError(Exception):
    """Base class for errors the CLI reports straight to the user."""

    pass


class AuthError(ReviewClientError):
    """No usable stored token."""

    pass


class ValidationError(ReviewClientError):
    """The directory to push is missing or has nothing to review."""

    pass


class TransportError(ReviewClientError):
    """The request never got a response (connection refused, DNS, timeout)."""

    pass


class ServerError(ReviewClientError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
