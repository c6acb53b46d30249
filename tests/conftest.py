import base64
from typing import Any, Callable, Dict, Iterator

import pytest
import requests
from jwskate import Jwk, Jwt

from requests_oauth2tokens import (
    ClientRegistration,
    Regions,
    ServerConfig,
    TokenManager,
)

TokenFactory = Callable[..., str]


@pytest.fixture(scope="session")
def tenant_id() -> str:
    return "my_tenant_id"


@pytest.fixture(scope="session")
def server_config(tenant_id: str) -> ServerConfig:
    return ServerConfig(tenant_id, Regions.US_SOUTH)


@pytest.fixture(scope="session")
def token_endpoint(tenant_id: str) -> str:
    return f"https://appid-oauth.ng.bluemix.net/oauth/v3/{tenant_id}/token"


@pytest.fixture(scope="session")
def client_id() -> str:
    return "client_id"


@pytest.fixture(scope="session")
def redirect_uri() -> str:
    return "https://myapp.local/callback"


@pytest.fixture(scope="session")
def private_jwk() -> Jwk:
    return Jwk.generate(alg="RS256").with_kid_thumbprint()


@pytest.fixture(scope="session")
def public_jwk(private_jwk: Jwk) -> Jwk:
    return private_jwk.public_jwk()


@pytest.fixture(scope="session")
def registration(client_id: str, private_jwk: Jwk, redirect_uri: str) -> ClientRegistration:
    return ClientRegistration(client_id, private_jwk, [redirect_uri])


@pytest.fixture(scope="session")
def server_signing_key() -> Jwk:
    return Jwk.generate(alg="RS256").with_kid_thumbprint()


@pytest.fixture(scope="session")
def token_factory(server_signing_key: Jwk, tenant_id: str) -> TokenFactory:
    def factory(**claims: Any) -> str:
        claims.setdefault("iss", "appid-oauth.ng.bluemix.net")
        claims.setdefault("tenant", tenant_id)
        claims.setdefault("iat", Jwt.timestamp())
        claims.setdefault("exp", Jwt.timestamp(3600))
        return str(Jwt.sign(claims, key=server_signing_key, alg="RS256"))

    return factory


@pytest.fixture(scope="session")
def access_token(token_factory: TokenFactory, client_id: str) -> str:
    return token_factory(aud=client_id, sub="user1", scope="openid appid_default")


@pytest.fixture(scope="session")
def id_token(token_factory: TokenFactory, client_id: str) -> str:
    return token_factory(aud=client_id, sub="user1", name="John Doe", email="john@doe.local")


@pytest.fixture(scope="session")
def token_response(access_token: str, id_token: str) -> Dict[str, Any]:
    return {
        "access_token": access_token,
        "id_token": id_token,
        "token_type": "Bearer",
        "expires_in": 3600,
    }


@pytest.fixture
def manager(server_config: ServerConfig, registration: ClientRegistration) -> Iterator[TokenManager]:
    with TokenManager(server_config, registration, session=requests.Session()) as token_manager:
        yield token_manager


@pytest.fixture(scope="session")
def client_assertion_validator() -> Callable[..., None]:
    def validator(authorization: str, *, client_id: str, public_jwk: Jwk) -> None:
        scheme, _, credentials = authorization.partition(" ")
        assert scheme == "Basic"
        decoded_client_id, _, assertion = base64.b64decode(credentials).decode().partition(":")
        assert decoded_client_id == client_id
        assert public_jwk.verify(client_id.encode(), base64.b64decode(assertion), alg="RS256")

    return validator

