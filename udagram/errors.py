"""
Exception taxonomy shared by the udagram services.

Every error a handler raises derives from ServiceError, which knows the HTTP
status it maps to. Each app registers its own exception handler and decides
how to render the message (plain text for the filter service, JSON for the
users API).
"""


class ServiceError(Exception):
    """Base class for errors that terminate a request with a fixed status."""

    status_code: int = 500

    def __init__(self, message: str, *, auth: bool | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.auth = auth
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> dict:
        """JSON body for this error. The auth flag is only present when set."""
        if self.auth is None:
            return {"message": self.message}
        return {"auth": self.auth, "message": self.message}


class InvalidInput(ServiceError):
    """Missing or malformed client input."""

    status_code = 400


class UserExists(InvalidInput):
    """Registration for an email that is already taken."""

    status_code = 422


class AuthError(ServiceError):
    """Missing, malformed or rejected credentials."""

    status_code = 401


class TokenError(AuthError):
    """Raised by the token verifier when a bearer token is not acceptable."""


class MalformedToken(TokenError):
    """The token is not a structurally valid signed token."""


class InvalidSignature(TokenError):
    """The token does not verify under the configured secret."""


class AuthenticationFailed(AuthError):
    """Token verification failed inside the auth dependency.

    Reported as 500 to stay compatible with existing clients of the
    verification route.
    """

    status_code = 500


class UpstreamError(ServiceError):
    """A remote resource needed to serve the request was unusable."""

    status_code = 500


class FetchOrDecodeError(UpstreamError):
    """The source image could not be downloaded or decoded."""
