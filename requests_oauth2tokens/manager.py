"""This module contains the `TokenManager` class."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, ClassVar

import requests
from attrs import frozen
from jwskate import SignatureAlgs
from typing_extensions import Self

from .cache import TokenCache
from .client_authentication import client_assertion_header
from .exceptions import (
    AccessTokenParseError,
    AuthorizationFailure,
    IdentityTokenParseError,
    InvalidGrant,
    ResponseParseError,
    SignerError,
    TransportError,
)
from .grants import AuthorizationCodeGrant, Grant, ResourceOwnerPasswordGrant
from .tokens import AccessToken, IdToken, TokenPair

if TYPE_CHECKING:
    from types import TracebackType

    from .config import ClientRegistration, ServerConfig

logger = logging.getLogger(__name__)


@frozen(init=False)
class TokenManager:
    """Obtain tokens from the Token Endpoint, and keep the latest ones.

    A `TokenManager` exchanges an Authorization Code, or a Resource Owner username and password,
    for an Access Token and an ID Token. Requests to the Token Endpoint are authenticated with a
    client assertion signed with the client private key.

    Requests are sent in the background, using an `Executor`. Each grant method returns
    immediately with a `Future`, which resolves to a
    [TokenPair][requests_oauth2tokens.tokens.TokenPair], or to a
    [TokenError][requests_oauth2tokens.exceptions.TokenError] describing the failure.
    Callbacks added with `Future.add_done_callback()` run on the executor thread.

    Tokens from the latest successful exchange are kept in a
    [TokenCache][requests_oauth2tokens.cache.TokenCache].

    Args:
        config: the Authorization Server configuration
        registration: the client registration data, with the `client_id`, `redirect_uris` and
            the private key used to sign client assertions.
        session: a requests Session to use when sending HTTP requests.
        executor: the `Executor` to run requests on. If `None`, a dedicated `ThreadPoolExecutor`
            is created, and shut down by `close()`.
        cache: the `TokenCache` to store tokens into. If `None`, a new empty cache is used.
        timeout: a timeout value for the HTTP calls, passed to `requests`.
        alg: the signature alg for client assertions.

    Example:
        ```python
        config = ServerConfig("my_tenant_id", Regions.US_SOUTH)
        registration = ClientRegistration("my_client_id", my_private_jwk, "https://my.app/callback")

        with TokenManager(config, registration) as manager:
            tokens = manager.obtain_tokens("my_authorization_code").result()
            assert manager.latest_access_token == tokens.access_token
        ```

    """

    config: ServerConfig
    registration: ClientRegistration
    session: requests.Session
    executor: Executor
    cache: TokenCache
    timeout: int
    alg: str
    owns_executor: bool

    INVALID_GRANT: ClassVar[str] = "invalid_grant"

    def __init__(
        self,
        config: ServerConfig,
        registration: ClientRegistration,
        *,
        session: requests.Session | None = None,
        executor: Executor | None = None,
        cache: TokenCache | None = None,
        timeout: int = 10,
        alg: str = SignatureAlgs.RS256,
    ) -> None:
        owns_executor = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(thread_name_prefix="token-manager")
        self.__attrs_init__(
            config=config,
            registration=registration,
            session=session if session is not None else requests.Session(),
            executor=executor,
            cache=cache if cache is not None else TokenCache(),
            timeout=timeout,
            alg=alg,
            owns_executor=owns_executor,
        )

    def obtain_tokens(self, code: str) -> Future[TokenPair]:
        """Exchange an Authorization Code for tokens.

        The `client_id` and first registered `redirect_uri` from the client registration are sent
        along with the code.

        Args:
            code: the authorization code to exchange.

        Returns:
            a `Future` that resolves to the obtained `TokenPair`.

        """
        logger.debug("obtain_tokens")
        grant = AuthorizationCodeGrant(code=code, redirect_uri=self.registration.redirect_uri(0))
        return self.token_request(grant)

    def obtain_tokens_with_password(self, username: str, password: str) -> Future[TokenPair]:
        """Exchange a Resource Owner username and password for tokens.

        Args:
            username: the resource owner user name
            password: the resource owner password

        Returns:
            a `Future` that resolves to the obtained `TokenPair`.

        """
        logger.debug("obtain_tokens - with resource owner password")
        return self.token_request(ResourceOwnerPasswordGrant(username=username, password=password))

    def token_request(self, grant: Grant) -> Future[TokenPair]:
        """Send a request to the Token Endpoint with the given grant.

        The client assertion is built on the calling thread. If that fails, no request is sent
        and the returned `Future` already holds a `SignerError`.
        Likewise, once the executor is shut down, the returned `Future` already holds the
        `RuntimeError` raised by the executor.

        Args:
            grant: the grant to exchange.

        Returns:
            a `Future` that resolves to the obtained `TokenPair`.

        """
        client_id = self.registration.client_id
        data = grant.form_params(client_id)
        try:
            authorization = client_assertion_header(client_id, self.registration.private_key, self.alg)
        except SignerError as exc:
            logger.error("Failed to create authentication header", exc_info=exc)
            failed: Future[TokenPair] = Future()
            failed.set_exception(exc)
            return failed

        try:
            return self.executor.submit(self._retrieve_tokens, data, authorization)
        except RuntimeError as exc:
            logger.error("Cannot send token request, the executor is shut down", exc_info=exc)
            closed: Future[TokenPair] = Future()
            closed.set_exception(exc)
            return closed

    def _retrieve_tokens(self, data: dict[str, str], authorization: str) -> TokenPair:
        """Send the token request and handle the response.

        This runs on the executor.

        """
        token_endpoint = self.config.token_endpoint
        logger.debug("Sending token request to %s", token_endpoint)
        try:
            response = self.session.post(
                token_endpoint,
                data=data,
                headers={"Authorization": authorization, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to retrieve tokens from authorization server", exc_info=exc)
            raise TransportError from exc

        if 200 <= response.status_code < 300:
            return self.parse_token_response(response)
        return self.on_token_error(response)

    def parse_token_response(self, response: requests.Response) -> TokenPair:
        """Parse a successful response returned by the Token Endpoint.

        The tokens are stored in the cache only if both tokens are parsed successfully. If the
        Access Token is valid but the ID Token is not, previously stored tokens are cleared.

        Args:
            response: the [Response][requests.Response] returned by the Token Endpoint.

        Returns:
            a `TokenPair` with the Access Token and ID Token from the response.

        Raises:
            ResponseParseError: if the response is not a JSON object with an `access_token`.
            AccessTokenParseError: if the `access_token` is not a well-formed JWT.
            IdentityTokenParseError: if the `id_token` is missing or not a well-formed JWT.

        """
        logger.debug("Extracting tokens from server response")
        try:
            data = response.json()
            access_token_value = data["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Failed to parse server response", exc_info=exc)
            raise ResponseParseError(response) from exc
        if not isinstance(access_token_value, str):
            logger.error("Failed to parse server response: access_token is not a string")
            raise ResponseParseError(response)

        try:
            access_token = AccessToken(access_token_value)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to parse access_token", exc_info=exc)
            raise AccessTokenParseError(response) from exc

        try:
            id_token = IdToken(data["id_token"])
        except Exception as exc:  # noqa: BLE001
            self.cache.clear()
            logger.error("Failed to parse id_token", exc_info=exc)
            raise IdentityTokenParseError(response) from exc

        token_pair = TokenPair(access_token=access_token, id_token=id_token)
        self.cache.store(token_pair)
        return token_pair

    def on_token_error(self, response: requests.Response) -> TokenPair:
        """Error handler for Token Endpoint error responses.

        Only the `invalid_grant` error, returned with a HTTP 400 status, is reported with the
        `error_description` from the Authorization Server. Any other error is reported with a
        generic message.

        Args:
            response: the [Response][requests.Response] returned by the Token Endpoint.

        Returns:
            nothing, and raises an exception instead. But a subclass may return a `TokenPair` to
            implement a default behaviour if needed.

        Raises:
            InvalidGrant: if the AS returns an `invalid_grant` error.
            AuthorizationFailure: for any other error.

        """
        logger.error(
            "Failed to retrieve tokens from authorization server: HTTP %s %s",
            response.status_code,
            response.reason,
        )
        if response.status_code == requests.codes.bad_request:
            try:
                data = response.json()
                error = data["error"]
                description = data["error_description"]
            except (ValueError, KeyError, TypeError):
                logger.warning("The authorization server returned a non-standard error response")
            else:
                if error == self.INVALID_GRANT and isinstance(description, str):
                    raise InvalidGrant(response, description)
        raise AuthorizationFailure(response)

    @property
    def latest_access_token(self) -> AccessToken | None:
        """The Access Token from the latest successful exchange, if any."""
        return self.cache.latest_access_token

    @property
    def latest_id_token(self) -> IdToken | None:
        """The ID Token from the latest successful exchange, if any."""
        return self.cache.latest_id_token

    def clear_stored_tokens(self) -> None:
        """Forget the stored tokens."""
        self.cache.clear()

    def close(self) -> None:
        """Shut down the executor, if it was created by this `TokenManager`.

        Pending requests are completed before returning. Requests made afterwards are not sent:
        their `Future` fails with a `RuntimeError`.

        """
        if self.owns_executor:
            self.executor.shutdown(wait=True)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
