"""Flickr OAuth 1.0a client."""
from .auth_state import AuthenticationPermission, OAuthState
from .client import FLICKR_ENDPOINTS, FlickrEndpoints, FlickrOAuth
from .config import FlickrOAuthConfig, TokenStore, load_config, save_config
from .errors import (
    AccessTokenError,
    AuthorizationCancelledError,
    AuthorizationInProgressError,
    CallbackAlreadyInvokedError,
    FlickrOAuthError,
    InvalidCallbackError,
    MalformedResponseError,
    OAuthSequenceError,
    PresenterError,
    RequestTokenNotConfirmedError,
    TransportError,
)
from .logging_config import setup_logging
from .presenter import AuthorizationPresenter, BrowserAuthorizationPresenter
from .result import FlickrUser, OAuthFailure, OAuthResult, OAuthSuccess

__all__ = [
    "AccessTokenError",
    "AuthenticationPermission",
    "AuthorizationCancelledError",
    "AuthorizationInProgressError",
    "AuthorizationPresenter",
    "BrowserAuthorizationPresenter",
    "CallbackAlreadyInvokedError",
    "FLICKR_ENDPOINTS",
    "FlickrEndpoints",
    "FlickrOAuth",
    "FlickrOAuthConfig",
    "FlickrOAuthError",
    "FlickrUser",
    "InvalidCallbackError",
    "MalformedResponseError",
    "OAuthFailure",
    "OAuthResult",
    "OAuthSequenceError",
    "OAuthState",
    "OAuthSuccess",
    "PresenterError",
    "RequestTokenNotConfirmedError",
    "TokenStore",
    "TransportError",
    "load_config",
    "save_config",
    "setup_logging",
]
