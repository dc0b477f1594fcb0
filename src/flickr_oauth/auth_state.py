"""State management for the Flickr OAuth handshake."""
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import OAuthSequenceError


class OAuthState(Enum):
    REQUEST_TOKEN = "request_token"
    ACCESS_TOKEN = "access_token"


class AuthenticationPermission(Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


_STATE_ORDER = [OAuthState.REQUEST_TOKEN, OAuthState.ACCESS_TOKEN]


@dataclass
class HandshakeContext:
    """Holds the state and token pair for one authorize() call."""
    permission: AuthenticationPermission
    state: OAuthState = OAuthState.REQUEST_TOKEN
    token: Optional[str] = None
    token_secret: Optional[str] = None
    verifier: Optional[str] = None

    def advance(self, new_state: OAuthState):
        """Move to new_state. The handshake never goes backwards."""
        if _STATE_ORDER.index(new_state) < _STATE_ORDER.index(self.state):
            raise OAuthSequenceError(
                f"Cannot move handshake from {self.state.value} back to {new_state.value}"
            )
        self.state = new_state

    def update_tokens(self, parameters: Dict[str, str]):
        """Overwrite the token pair from a parsed response."""
        self.token = parameters.get("oauth_token")
        self.token_secret = parameters.get("oauth_token_secret")

    def require_token(self) -> str:
        if self.token is None:
            raise OAuthSequenceError(
                f"No oauth_token available in state {self.state.value}; "
                "the request token step must complete first"
            )
        return self.token
