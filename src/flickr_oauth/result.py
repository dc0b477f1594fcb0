"""Outcome of an authorize() call."""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Union

from .errors import CallbackAlreadyInvokedError, FlickrOAuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlickrUser:
    fullname: str
    username: str
    user_id: str


@dataclass(frozen=True)
class OAuthSuccess:
    token: str
    token_secret: str
    user: FlickrUser

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class OAuthFailure:
    error: FlickrOAuthError

    @property
    def success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)


OAuthResult = Union[OAuthSuccess, OAuthFailure]
CompletionHandler = Callable[[OAuthResult], None]


class OneShotCallback:
    """Wraps a completion handler so it can only ever run once."""

    def __init__(self, handler: CompletionHandler):
        self._handler = handler
        self._lock = threading.Lock()
        self._invoked = False

    @property
    def invoked(self) -> bool:
        return self._invoked

    def __call__(self, result: OAuthResult):
        with self._lock:
            if self._invoked:
                raise CallbackAlreadyInvokedError("Completion handler already invoked")
            self._invoked = True
        logger.debug(f"Delivering authorization result (success={result.success})")
        self._handler(result)
