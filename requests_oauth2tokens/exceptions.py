"""This module contains all exception classes from `requests_oauth2tokens`."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import requests


class TokenError(Exception):
    """Base class for all errors that terminate a token retrieval attempt.

    All token errors are delivered through the `Future` returned by
    [TokenManager][requests_oauth2tokens.manager.TokenManager], and carry a human-readable message.

    """


class SignerError(TokenError):
    """Raised when the client assertion cannot be built.

    When this happens, no request is sent to the Token Endpoint.

    """

    def __init__(self, client_id: str | None) -> None:
        super().__init__("Failed to create authentication header")
        self.client_id = client_id


class AuthorizationFailure(TokenError):
    """Raised when the Authorization Server does not return tokens.

    The message contains the `error_description` returned by the AS only for the `invalid_grant`
    error. Any other error response results in a generic message, but the raw response is still
    available in the `response` attribute.

    Args:
        response: the raw response returned by the AS, if any.
        error: the `error` identifier as returned by the AS.
        description: the `error_description` as returned by the AS.

    """

    def __init__(
        self,
        response: requests.Response | None = None,
        error: str | None = None,
        description: str | None = None,
    ) -> None:
        if description is not None:
            super().__init__(f"Failed to retrieve tokens: {description}")
        else:
            super().__init__("Failed to retrieve tokens")
        self.response = response
        self.error = error
        self.description = description


class InvalidGrant(AuthorizationFailure):
    """Raised when the Token Endpoint returns `error = invalid_grant`."""

    def __init__(self, response: requests.Response, description: str) -> None:
        super().__init__(response, error="invalid_grant", description=description)


class TransportError(AuthorizationFailure):
    """Raised when the Token Endpoint cannot be reached.

    The underlying network exception is chained to this exception and logged, but its details are
    not part of the message.

    """


class ResponseParseError(TokenError):
    """Raised when the Token Endpoint returns a success response that cannot be parsed."""

    message = "Failed to parse server response"

    def __init__(self, response: requests.Response) -> None:
        super().__init__(self.message)
        self.response = response


class AccessTokenParseError(ResponseParseError):
    """Raised when the returned `access_token` is not a well-formed token."""

    message = "Failed to parse access_token"


class IdentityTokenParseError(ResponseParseError):
    """Raised when the returned `id_token` is missing or not a well-formed token.

    Raising this error also clears the previously stored tokens.

    """

    message = "Failed to parse id_token"
