"""This module implements the signed client credential sent to the Token Endpoint.

Instead of a Client Secret, the client proves possession of its private key by signing its own
Client ID. The resulting signature, the *client assertion*, is sent along with the Client ID in
an `Authorization` header with the `Basic` scheme:

    Authorization: Basic BASE64('<client_id>:<BASE64(SIGN(client_id))>')

The assertion is recomputed for each request and is never stored.

"""

from __future__ import annotations

from typing import Any

import requests
from attrs import field, frozen
from binapy import BinaPy
from jwskate import Jwk, SignatureAlgs, to_jwk

from .exceptions import SignerError


class InvalidRequestForClientAuthentication(RuntimeError):
    """Raised when a request is not suitable for OAuth 2.0 client authentication."""

    def __init__(self, request: requests.PreparedRequest) -> None:
        super().__init__("This request is not suitable for OAuth 2.0 client authentication.")
        self.request = request


def client_assertion(client_id: str, private_key: Jwk | dict[str, Any] | Any, alg: str = SignatureAlgs.RS256) -> str:
    """Sign a Client ID with the client private key.

    Args:
        client_id: the Client ID to sign.
        private_key: the client private key, as a `Jwk` or any key material that `jwskate` accepts.
        alg: the signature alg to use. Defaults to `RS256` (SHA256withRSA).

    Returns:
        the signature, Base64-encoded without line wrapping.

    Raises:
        SignerError: if the key is missing, is not an asymmetric private key, or cannot sign
            with `alg`.

    """
    if private_key is None:
        raise SignerError(client_id)
    try:
        jwk = to_jwk(private_key)
    except Exception as exc:
        raise SignerError(client_id) from exc
    if not jwk.is_private or jwk.is_symmetric:
        raise SignerError(client_id)
    try:
        signature = jwk.sign(client_id.encode(), alg=alg)
    except Exception as exc:
        raise SignerError(client_id) from exc
    return signature.to("b64").ascii()


def client_assertion_header(
    client_id: str, private_key: Jwk | dict[str, Any] | Any, alg: str = SignatureAlgs.RS256
) -> str:
    """Return the `Authorization` header value that authenticates `client_id`.

    Raises:
        SignerError: if the client assertion cannot be built.

    """
    assertion = client_assertion(client_id, private_key, alg)
    b64encoded_credentials = BinaPy(f"{client_id}:{assertion}").to("b64").ascii()
    return f"Basic {b64encoded_credentials}"


@frozen(init=False)
class ClientAssertionBasic(requests.auth.AuthBase):
    """A `requests` Auth Handler that adds a signed client assertion to Token Endpoint requests.

    Args:
        client_id: the Client ID
        private_key: the private key used to sign the Client ID
        alg: the signature alg

    Example:
        ```python
        import requests
        from requests_oauth2tokens import ClientAssertionBasic

        auth = ClientAssertionBasic("my_client_id", my_private_jwk)
        requests.post("https://url.to.the/token", data={"grant_type": "password", ...}, auth=auth)
        ```

    """

    client_id: str
    private_key: Jwk = field(converter=to_jwk)
    alg: str

    def __init__(self, client_id: str, private_key: Jwk | dict[str, Any] | Any, alg: str = SignatureAlgs.RS256) -> None:
        self.__attrs_init__(client_id=client_id, private_key=private_key, alg=alg)

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        """Add the `Authorization` header to a POST request with form data.

        Raises:
            InvalidRequestForClientAuthentication: if the request is not a POST with a
                `application/x-www-form-urlencoded` body.
            SignerError: if the client assertion cannot be built.

        """
        if request.method != "POST" or request.headers.get("Content-Type") not in (
            "application/x-www-form-urlencoded",
            None,
        ):
            raise InvalidRequestForClientAuthentication(request)
        request.headers["Authorization"] = client_assertion_header(self.client_id, self.private_key, self.alg)
        return request
