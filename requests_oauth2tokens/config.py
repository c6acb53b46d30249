"""Configuration for the Authorization Server and the registered client.

Those objects are the only inputs a [TokenManager][requests_oauth2tokens.manager.TokenManager]
needs: where the Authorization Server is, and who the client is. Client registration itself is
out of scope, so a `ClientRegistration` is expected to be built from already provisioned values.

"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Sequence

from attrs import Attribute, field, frozen
from jwskate import Jwk, to_jwk

from .utils import https_url_problem, join_path


class Regions(str, Enum):
    """Well-known region suffixes for the default OAuth server host."""

    US_SOUTH = ".ng.bluemix.net"
    UK = ".eu-gb.bluemix.net"
    SYDNEY = ".au-syd.bluemix.net"
    GERMANY = ".eu-de.bluemix.net"
    WASHINGTON = ".us-east.bluemix.net"
    TOKYO = ".jp-tok.bluemix.net"


class InvalidParam(ValueError):
    """Base class for invalid configuration parameters errors."""


class InvalidEndpointUri(InvalidParam):
    """Raised when an invalid endpoint uri is configured."""

    def __init__(self, endpoint: str, uri: str, reason: str) -> None:
        super().__init__(f"Invalid endpoint uri '{uri}' for '{endpoint}': {reason}")
        self.endpoint = endpoint
        self.uri = uri
        self.reason = reason


class MissingRedirectUri(InvalidParam, IndexError):
    """Raised when a redirect_uri is required but not registered."""

    def __init__(self, index: int) -> None:
        super().__init__(f"No redirect_uri is registered at index {index}.")
        self.index = index


def _region_suffix(region: str | Regions) -> str:
    if isinstance(region, Regions):
        return region.value
    return region


@frozen
class ServerConfig:
    """Locate the OAuth server for a given tenant.

    By default, the OAuth server url is derived from the `region` suffix and the `tenant_id`.
    A `server_host` can be provided to override the default host and path; the `tenant_id` is
    then appended to it.

    Args:
        tenant_id: the tenant identifier.
        region: the region suffix, as one of the `Regions` values or any custom domain suffix.
        server_host: an optional server url that overrides the default one.
        testing: if `True`, don't verify the validity of the resulting endpoint urls.

    Example:
        ```python
        from requests_oauth2tokens import Regions, ServerConfig

        config = ServerConfig("my_tenant_id", Regions.US_SOUTH)
        assert config.token_endpoint == "https://appid-oauth.ng.bluemix.net/oauth/v3/my_tenant_id/token"
        ```

    """

    DEFAULT_SERVER_HOST: ClassVar[str] = "https://appid-oauth{region}/oauth/v3/"
    TOKEN_PATH: ClassVar[str] = "token"

    tenant_id: str = field()
    region: str = field(default=Regions.US_SOUTH.value, converter=_region_suffix)
    server_host: str | None = None
    testing: bool = False

    @tenant_id.validator
    def _validate_tenant_id(self, attribute: Attribute[str], value: str) -> None:
        if not value:
            msg = "A tenant_id is required."
            raise InvalidParam(msg)

    def __attrs_post_init__(self) -> None:
        if self.testing:
            return
        problem = https_url_problem(self.oauth_server_url)
        if problem is not None:
            raise InvalidEndpointUri("oauth_server_url", self.oauth_server_url, problem)

    @property
    def oauth_server_url(self) -> str:
        """The base url of the OAuth server for this tenant."""
        if self.server_host is not None:
            return join_path(self.server_host, self.tenant_id)
        return join_path(self.DEFAULT_SERVER_HOST.format(region=self.region), self.tenant_id)

    @property
    def token_endpoint(self) -> str:
        """The Token Endpoint url."""
        return join_path(self.oauth_server_url, self.TOKEN_PATH)


def _to_redirect_uris(value: str | Sequence[str] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@frozen(init=False)
class ClientRegistration:
    """The registration data of this client, as provisioned by the Authorization Server.

    Args:
        client_id: the Client ID.
        private_key: the private key used to sign client assertions. Can be a `jwskate.Jwk`, a
            `dict` with the key in JWK format, or a `cryptography` private key.
        redirect_uris: the registered redirect uris.

    """

    client_id: str = field()
    private_key: Jwk | None
    redirect_uris: tuple[str, ...]

    @client_id.validator
    def _validate_client_id(self, attribute: Attribute[str], value: str) -> None:
        if not value or not isinstance(value, str):
            msg = "A client_id is required."
            raise InvalidParam(msg)

    def __init__(
        self,
        client_id: str,
        private_key: Jwk | dict[str, Any] | Any | None,
        redirect_uris: str | Sequence[str] | None = None,
    ) -> None:
        self.__attrs_init__(
            client_id=client_id,
            private_key=to_jwk(private_key) if private_key is not None else None,
            redirect_uris=_to_redirect_uris(redirect_uris),
        )

    @classmethod
    def from_pem(
        cls,
        client_id: str,
        pem: str | bytes,
        redirect_uris: str | Sequence[str] | None = None,
        password: bytes | str | None = None,
    ) -> ClientRegistration:
        """Initialize a `ClientRegistration` from a private key in PEM format."""
        return cls(client_id, Jwk.from_pem(pem, password), redirect_uris)

    def redirect_uri(self, index: int = 0) -> str:
        """Return the redirect_uri registered at `index`.

        Raises:
            MissingRedirectUri: if there is no such redirect_uri.

        """
        try:
            return self.redirect_uris[index]
        except IndexError:
            raise MissingRedirectUri(index) from None
