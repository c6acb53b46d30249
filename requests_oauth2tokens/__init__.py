"""Main module for `requests_oauth2tokens`.

You can import any class from any submodule directly from this main module.
"""

from .cache import TokenCache
from .client_authentication import (
    ClientAssertionBasic,
    InvalidRequestForClientAuthentication,
    client_assertion,
    client_assertion_header,
)
from .config import (
    ClientRegistration,
    InvalidEndpointUri,
    InvalidParam,
    MissingRedirectUri,
    Regions,
    ServerConfig,
)
from .exceptions import (
    AccessTokenParseError,
    AuthorizationFailure,
    IdentityTokenParseError,
    InvalidGrant,
    ResponseParseError,
    SignerError,
    TokenError,
    TransportError,
)
from .grants import (
    AuthorizationCodeGrant,
    Grant,
    GrantTypes,
    ResourceOwnerPasswordGrant,
)
from .manager import TokenManager
from .tokens import AccessToken, IdToken, TokenPair
