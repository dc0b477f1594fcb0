"""
Flickr OAuth 1.0a client.

The flow has 3 steps:
  1. Get a request token                 (_get_request_token)
  2. Get the user's authorization        (_prompt_user_for_authorization)
  3. Exchange it for an access token     (_get_access_token)

See https://www.flickr.com/services/api/auth.oauth.html
"""
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .auth_state import AuthenticationPermission, HandshakeContext, OAuthState
from .config import DEFAULT_REQUEST_TIMEOUT, FlickrOAuthConfig
from .errors import (
    AuthorizationCancelledError,
    AuthorizationInProgressError,
    FlickrOAuthError,
    InvalidCallbackError,
    OAuthSequenceError,
    PresenterError,
    TransportError,
)
from .parameters import (
    TOKEN,
    VERIFIER,
    Parameters,
    authorization_url,
    callback_parameters,
    extract_verifier,
    generate_request_parameters,
    signed_url,
)
from .presenter import AuthorizationPresenter, BrowserAuthorizationPresenter
from .response_parser import (
    decode_body,
    parse_response,
    problem_description,
    user_from_response,
    validate_response,
)
from .result import (
    CompletionHandler,
    FlickrUser,
    OAuthFailure,
    OAuthResult,
    OAuthSuccess,
    OneShotCallback,
)
from .signature import sign_request

logger = logging.getLogger(__name__)

HTTP_METHOD = "GET"


@dataclass(frozen=True)
class FlickrEndpoints:
    request_token_url: str = "https://www.flickr.com/services/oauth/request_token"
    authorize_url: str = "https://www.flickr.com/services/oauth/authorize"
    access_token_url: str = "https://www.flickr.com/services/oauth/access_token"

    def url_for_state(self, state: OAuthState) -> str:
        if state is OAuthState.REQUEST_TOKEN:
            return self.request_token_url
        return self.access_token_url


FLICKR_ENDPOINTS = FlickrEndpoints()


class FlickrOAuth:
    """Drives the three-legged handshake and reports one result per authorize call.

    One handshake may run per instance at a time; starting another before
    the first completes raises AuthorizationInProgressError.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        callback_url: str,
        presenter: Optional[AuthorizationPresenter] = None,
        session: Optional[requests.Session] = None,
        endpoints: FlickrEndpoints = FLICKR_ENDPOINTS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.callback_url = callback_url
        self.presenter = presenter or BrowserAuthorizationPresenter()
        self.session = session or requests.Session()
        self.endpoints = endpoints
        self.timeout = timeout
        self._lock = threading.Lock()
        self._in_flight = False

    @classmethod
    def from_config(cls, config: FlickrOAuthConfig,
                    presenter: Optional[AuthorizationPresenter] = None,
                    session: Optional[requests.Session] = None) -> "FlickrOAuth":
        if presenter is None:
            presenter = BrowserAuthorizationPresenter(timeout=config.authorization_timeout)
        return cls(
            consumer_key=config.consumer_key,
            consumer_secret=config.consumer_secret,
            callback_url=config.callback_url,
            presenter=presenter,
            session=session,
            timeout=config.request_timeout,
        )

    # Public

    def authorize(self, permission: AuthenticationPermission,
                  on_complete: CompletionHandler) -> asyncio.Future:
        """
        Start the handshake in the background.

        Must be called from a running event loop. on_complete receives the
        OAuthSuccess or OAuthFailure exactly once, on that loop. Cancelling
        the returned future reports AuthorizationCancelledError and stops the
        handshake before its next step.
        """
        callback = OneShotCallback(on_complete)
        future = self._start_handshake(permission)

        def _deliver(done: asyncio.Future):
            if done.cancelled():
                callback(OAuthFailure(error=AuthorizationCancelledError("Authorization was cancelled")))
                return
            if done.exception() is not None:
                # Sequencing bugs are not results; they stay on the future
                logger.critical(f"Authorization aborted by an internal error: {done.exception()}")
                return
            callback(done.result())

        future.add_done_callback(_deliver)
        return future

    async def async_authorize(self, permission: AuthenticationPermission) -> OAuthResult:
        return await self._start_handshake(permission)

    def authorize_blocking(self, permission: AuthenticationPermission) -> OAuthResult:
        """Run the whole handshake on the calling thread."""
        self._begin()
        try:
            return self._run_handshake(permission)
        finally:
            self._finish()

    @property
    def in_progress(self) -> bool:
        return self._in_flight

    # Private

    def _begin(self):
        with self._lock:
            if self._in_flight:
                raise AuthorizationInProgressError("An authorization is already in progress")
            self._in_flight = True

    def _finish(self):
        with self._lock:
            self._in_flight = False

    def _start_handshake(self, permission: AuthenticationPermission) -> asyncio.Future:
        """
        Run the handshake on a worker thread and settle a future on the calling loop.

        The instance stays in progress until the worker returns, even if the
        future is cancelled first.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        cancelled = threading.Event()

        def _settle(result: Optional[OAuthResult], error: Optional[Exception]):
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def _worker():
            result, error = None, None
            try:
                result = self._run_handshake(permission, cancelled)
            except Exception as e:
                error = e
            finally:
                self._finish()
            try:
                loop.call_soon_threadsafe(_settle, result, error)
            except RuntimeError:
                logger.warning("Event loop closed before the authorization finished")

        def _on_done(done: asyncio.Future):
            if done.cancelled():
                logger.info("Authorization cancelled by the caller")
                cancelled.set()

        self._begin()
        future.add_done_callback(_on_done)
        thread = threading.Thread(target=_worker, name="flickr-oauth-handshake")
        thread.daemon = True
        try:
            thread.start()
        except Exception:
            self._finish()
            raise
        return future

    def _run_handshake(self, permission: AuthenticationPermission,
                       cancelled: Optional[threading.Event] = None) -> OAuthResult:
        context = HandshakeContext(permission=permission)
        if cancelled is None:
            cancelled = threading.Event()
        logger.debug(f"Starting Flickr authorization with {permission.value} permission")
        try:
            self._get_request_token(context)
            _raise_if_cancelled(cancelled)
            callback_url = self._prompt_user_for_authorization(context, cancelled)
            _raise_if_cancelled(cancelled)
            user = self._get_access_token(context, callback_url)
        except FlickrOAuthError as e:
            logger.error(f"Failed authorize with Flickr. Error: {e}")
            return OAuthFailure(error=e)

        logger.info(f"Authorized Flickr user {user.username} ({user.user_id})")
        return OAuthSuccess(token=context.token, token_secret=context.token_secret, user=user)

    # Request Token

    def _get_request_token(self, context: HandshakeContext):
        context.advance(OAuthState.REQUEST_TOKEN)
        parameters = generate_request_parameters(context, self.consumer_key, self.callback_url)
        response = self._signed_get(context, parameters)
        validate_response(context.state, response)
        context.update_tokens(response)
        logger.info(f"Obtained Flickr request token (oauth_token={context.token[:8]}...)")

    # User Authorization

    def _prompt_user_for_authorization(self, context: HandshakeContext,
                                       cancelled: threading.Event) -> str:
        url = authorization_url(self.endpoints.authorize_url, context.require_token(), context.permission)
        try:
            return self.presenter.present(url, self.callback_url, cancelled=cancelled)
        except (FlickrOAuthError, OAuthSequenceError):
            raise
        except Exception as e:
            logger.error(f"Authorization presenter failed: {str(e)}", exc_info=True)
            raise PresenterError(str(e)) from e

    def _verifier_from_callback(self, context: HandshakeContext, callback_url: str) -> str:
        verifier = extract_verifier(callback_url)
        if verifier is None:
            raise InvalidCallbackError("Authorization callback carried no oauth_verifier")
        returned_token = callback_parameters(callback_url).get(TOKEN)
        if returned_token is not None and returned_token != context.token:
            raise InvalidCallbackError("Authorization callback is for a different request token")
        return verifier

    # Access Token

    def _get_access_token(self, context: HandshakeContext, callback_url: str) -> FlickrUser:
        context.verifier = self._verifier_from_callback(context, callback_url)
        context.advance(OAuthState.ACCESS_TOKEN)

        parameters = generate_request_parameters(context, self.consumer_key, self.callback_url)
        parameters[VERIFIER] = context.verifier
        response = self._signed_get(context, parameters)
        validate_response(context.state, response)
        context.update_tokens(response)
        return user_from_response(response)

    # Transport

    def _signed_get(self, context: HandshakeContext, parameters: Parameters) -> Dict[str, str]:
        base_url = self.endpoints.url_for_state(context.state)
        signature = sign_request(HTTP_METHOD, base_url, parameters,
                                 self.consumer_secret, context.token_secret)
        url = signed_url(base_url, parameters, signature)

        logger.debug(f"Requesting {base_url} ({context.state.value})")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            # The signed query carries the token and verifier
            reason = str(e).replace(url.split("?", 1)[1], "...")
            raise TransportError(f"Request to {base_url} failed: {reason}") from e

        if response.status_code >= 400:
            text = (response.content or b"").decode("utf-8", errors="replace")
            problem = problem_description(parse_response(text))
            raise TransportError(f"HTTP {response.status_code}: {problem or text[:300]}")

        return parse_response(decode_body(response.content))


def _raise_if_cancelled(cancelled: threading.Event):
    if cancelled.is_set():
        raise AuthorizationCancelledError("Authorization was cancelled")
