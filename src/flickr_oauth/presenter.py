"""Authorization presenters: show Flickr's authorization page and capture the redirect."""
from http.server import BaseHTTPRequestHandler, HTTPServer
import logging
import threading
import time
import webbrowser
from typing import Optional, Protocol
from urllib.parse import urlparse

from .errors import AuthorizationCancelledError, PresenterError
from .parameters import VERIFIER, callback_parameters

logger = logging.getLogger(__name__)

DEFAULT_AUTHORIZATION_TIMEOUT = 300  # 5 minutes in seconds
POLL_INTERVAL = 0.1

SUCCESS_PAGE = b"Authentication successful! You can close this window."
DENIED_PAGE = b"Authorization was not granted. You can close this window."


class AuthorizationPresenter(Protocol):
    """Shows the authorization URL to the user and returns the callback URL."""

    def present(self, authorization_url: str, callback_url: str,
                cancelled: Optional[threading.Event] = None) -> str:
        """
        Block until the user is redirected to callback_url.

        Once cancelled is set the presenter should stop waiting and raise
        AuthorizationCancelledError.

        Raises AuthorizationCancelledError if the user cancels and
        PresenterError if the presenter itself fails.
        """
        ...


class CallbackServer(HTTPServer):
    """Local server that records the first redirect to the callback URL."""

    def __init__(self, callback_url: str):
        parsed = urlparse(callback_url)
        if not parsed.hostname or not parsed.port:
            raise PresenterError(f"Callback URL must name a local host and port: {callback_url}")
        self.callback_prefix = callback_url
        self.callback_origin = f"{parsed.scheme}://{parsed.netloc}"
        self.callback_url: Optional[str] = None
        self.callback_received = threading.Event()
        super().__init__((parsed.hostname, parsed.port), OAuthCallbackHandler)


class OAuthCallbackHandler(BaseHTTPRequestHandler):
    """Handler for the Flickr authorization redirect."""

    def do_GET(self):
        full_url = f"{self.server.callback_origin}{self.path}"
        logger.debug(f"OAuth callback received on {urlparse(self.path).path}")

        if self.path.startswith('/favicon') or not full_url.startswith(self.server.callback_prefix):
            self.send_response(404)
            self.end_headers()
            return

        granted = VERIFIER in callback_parameters(full_url)
        self.send_response(200)
        self.send_header('Content-type', 'text/plain')
        self.end_headers()
        self.wfile.write(SUCCESS_PAGE if granted else DENIED_PAGE)

        if not self.server.callback_received.is_set():
            self.server.callback_url = full_url
            self.server.callback_received.set()

    def log_message(self, format, *args):
        """Override to use our logger, leaving out the query string."""
        message = format % args
        path = getattr(self, 'path', '')
        if path:
            message = message.replace(path, urlparse(path).path)
        logger.debug(f"Callback Server: {message}")


class BrowserAuthorizationPresenter:
    """Opens the system browser and listens on the callback URL for the redirect."""

    def __init__(self, timeout: float = DEFAULT_AUTHORIZATION_TIMEOUT, open_browser=webbrowser.open):
        self.timeout = timeout
        self._open_browser = open_browser

    def present(self, authorization_url: str, callback_url: str,
                cancelled: Optional[threading.Event] = None) -> str:
        server = self._start_callback_server(callback_url)
        try:
            logger.info(f"Opening browser for Flickr authorization at {authorization_url.split('?', 1)[0]}")
            if not self._open_browser(authorization_url):
                logger.warning("Could not open a browser; visit the authorization URL manually")

            deadline = time.monotonic() + self.timeout
            while not server.callback_received.wait(timeout=POLL_INTERVAL):
                if cancelled is not None and cancelled.is_set():
                    raise AuthorizationCancelledError("Authorization was cancelled")
                if time.monotonic() >= deadline:
                    logger.error("Timeout waiting for authorization callback")
                    raise AuthorizationCancelledError("Timed out waiting for the user to authorize")

            received = server.callback_url
            logger.info("Received authorization callback")
            if VERIFIER not in callback_parameters(received):
                raise AuthorizationCancelledError("The user did not authorize the application")
            return received
        finally:
            server.shutdown()
            server.server_close()

    def _start_callback_server(self, callback_url: str) -> CallbackServer:
        """Start local server to handle the authorization callback."""
        try:
            server = CallbackServer(callback_url)
        except OSError as e:
            logger.error(f"Error starting callback server: {str(e)}", exc_info=True)
            raise PresenterError(f"Could not listen on {callback_url}: {e}") from e

        thread = threading.Thread(target=server.serve_forever)
        thread.daemon = True
        thread.start()
        logger.debug("OAuth callback server started successfully")
        return server
