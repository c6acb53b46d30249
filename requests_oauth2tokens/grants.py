"""Token Endpoint request parameters for the supported grant types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar

from attrs import frozen


class GrantTypes(str, Enum):
    """An enum of the supported `grant_type` values."""

    AUTHORIZATION_CODE = "authorization_code"
    RESOURCE_OWNER_PASSWORD = "password"


@frozen
class Grant(ABC):
    """Base class for authorization grants that can be exchanged for tokens."""

    GRANT_TYPE: ClassVar[GrantTypes]

    @property
    def grant_type(self) -> str:
        """The `grant_type` value for this grant."""
        return self.GRANT_TYPE.value

    @abstractmethod
    def form_params(self, client_id: str) -> dict[str, str]:
        """Return the form parameters to send to the Token Endpoint for this grant."""


@frozen
class AuthorizationCodeGrant(Grant):
    """An Authorization Code, along with the `redirect_uri` that was used to obtain it."""

    GRANT_TYPE: ClassVar[GrantTypes] = GrantTypes.AUTHORIZATION_CODE

    code: str
    redirect_uri: str

    def form_params(self, client_id: str) -> dict[str, str]:
        return {
            "code": self.code,
            "client_id": client_id,
            "grant_type": self.grant_type,
            "redirect_uri": self.redirect_uri,
        }


@frozen(repr=False)
class ResourceOwnerPasswordGrant(Grant):
    """A Resource Owner username and password.

    The `client_id` is not part of the form parameters for this grant, the client is still
    authenticated by the `Authorization` header.

    """

    GRANT_TYPE: ClassVar[GrantTypes] = GrantTypes.RESOURCE_OWNER_PASSWORD

    username: str
    password: str

    def form_params(self, client_id: str) -> dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "grant_type": self.grant_type,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(username={self.username!r}, password='***')"
