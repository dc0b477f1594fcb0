"""Errors raised during the Flickr OAuth handshake."""


class FlickrOAuthError(Exception):
    """Base class for recoverable handshake failures."""


class TransportError(FlickrOAuthError):
    """The HTTP request failed or the server answered with an error status."""


class MalformedResponseError(FlickrOAuthError):
    """The response body was missing or could not be decoded."""


class RequestTokenNotConfirmedError(FlickrOAuthError):
    """The request-token response did not confirm the callback."""


class AccessTokenError(FlickrOAuthError):
    """The access-token response lacked the user identity fields."""


class AuthorizationCancelledError(FlickrOAuthError):
    """The user closed or denied the authorization screen."""


class PresenterError(FlickrOAuthError):
    """The authorization presenter could not complete."""


class InvalidCallbackError(FlickrOAuthError):
    """The authorization callback URL could not be used."""


class OAuthSequenceError(RuntimeError):
    """A handshake step ran out of order."""


class AuthorizationInProgressError(RuntimeError):
    """authorize() was called while a handshake was still running."""


class CallbackAlreadyInvokedError(RuntimeError):
    """A completion callback was invoked a second time."""
