"""This module contains classes that represent the tokens returned by the Token Endpoint.

Both the Access Token and the ID Token are Signed JWTs. They are only parsed structurally: their
signature and claims are not validated here.

"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

import jwskate
import requests
from attrs import frozen

ANONYMOUS_AMR = "appid_anon"


class _AppIdJwt(jwskate.SignedJwt):
    """Claim accessors that are common to Access Tokens and ID Tokens."""

    @property
    def authentication_methods(self) -> list[str]:
        """The Authentication Methods References (amr)."""
        amr = self.claims.get("amr")
        if amr is None:
            return []
        if isinstance(amr, str):
            return [amr]
        return list(amr)

    @property
    def is_anonymous(self) -> bool:
        """`True` if this token was issued for an anonymous user."""
        return ANONYMOUS_AMR in self.authentication_methods

    @property
    def tenant(self) -> str | None:
        """The tenant this token was issued for."""
        return self.claims.get("tenant")


class AccessToken(_AppIdJwt):
    """Represent an Access Token."""

    @property
    def scope(self) -> str | None:
        """The space separated `scope` granted to this token, if any."""
        return self.claims.get("scope")

    @property
    def scopes(self) -> list[str]:
        """The scopes granted to this token, as a list."""
        scope = self.scope
        if not scope:
            return []
        return scope.split()

    def authorization_header(self) -> str:
        """Return the value to use in an HTTP Authorization Header for this token."""
        return f"Bearer {self}"


class IdToken(_AppIdJwt):
    """Represent an ID Token."""

    @property
    def name(self) -> str | None:
        """The end-user full name."""
        return self.claims.get("name")

    @property
    def email(self) -> str | None:
        """The end-user email address."""
        return self.claims.get("email")

    @property
    def picture(self) -> str | None:
        """The end-user profile picture url."""
        return self.claims.get("picture")

    @property
    def locale(self) -> str | None:
        """The end-user locale."""
        return self.claims.get("locale")

    @property
    def authorized_party(self) -> str | None:
        """The Authorized Party (azp)."""
        azp = self.claims.get("azp")
        if azp is None or isinstance(azp, str):
            return azp
        msg = "`azp` attribute must be a string."
        raise AttributeError(msg)

    @property
    def auth_datetime(self) -> datetime | None:
        """The last user authentication time (auth_time)."""
        auth_time = self.claims.get("auth_time")
        if auth_time is None:
            return None
        if isinstance(auth_time, int) and auth_time > 0:
            return self.timestamp_to_datetime(auth_time)
        msg = "`auth_time` must be a positive integer"
        raise AttributeError(msg)


@frozen
class TokenPair(requests.auth.AuthBase):
    """An Access Token and the ID Token that was issued with it.

    A `TokenPair` can be used as a `requests` Auth Handler, to call APIs protected by the
    Access Token:

        ```python
        tokens = manager.obtain_tokens("my_code").result()
        requests.get("https://my.api.local/resource", auth=tokens)
        ```

    """

    AUTHORIZATION_HEADER: ClassVar[str] = "Authorization"

    access_token: AccessToken
    id_token: IdToken

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        """Add the Access Token in the `Authorization` header of the request."""
        request.headers[self.AUTHORIZATION_HEADER] = self.access_token.authorization_header()
        return request
