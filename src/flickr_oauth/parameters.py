"""Builds and assembles the OAuth parameter set for Flickr requests."""
import logging
import time
import uuid
from typing import Dict, List
from urllib.parse import parse_qs, quote, urlparse

from .auth_state import AuthenticationPermission, HandshakeContext, OAuthState

logger = logging.getLogger(__name__)

Parameters = Dict[str, str]

NONCE = "oauth_nonce"
TIMESTAMP = "oauth_timestamp"
CONSUMER_KEY = "oauth_consumer_key"
SIGNATURE_METHOD = "oauth_signature_method"
VERSION = "oauth_version"
CALLBACK = "oauth_callback"
SIGNATURE = "oauth_signature"
TOKEN = "oauth_token"
VERIFIER = "oauth_verifier"
PERMISSIONS = "perms"

HMAC_SHA1 = "HMAC-SHA1"
OAUTH_VERSION = "1.0"


def generate_nonce() -> str:
    return uuid.uuid4().hex


def generate_timestamp() -> str:
    """Seconds since the epoch, floored."""
    return str(int(time.time()))


def generate_request_parameters(context: HandshakeContext, consumer_key: str,
                                callback_url: str) -> Parameters:
    """Fresh OAuth parameters for the context's current state.

    The verifier for the access token request is merged in by the caller.
    """
    parameters = {
        NONCE: generate_nonce(),
        TIMESTAMP: generate_timestamp(),
        CONSUMER_KEY: consumer_key,
        SIGNATURE_METHOD: HMAC_SHA1,
        VERSION: OAUTH_VERSION,
    }

    if context.state is OAuthState.REQUEST_TOKEN:
        parameters[CALLBACK] = callback_url
    else:
        parameters[TOKEN] = context.require_token()

    return parameters


def oauth_encode(value: str) -> str:
    """Percent-encode everything outside A-Za-z0-9-._~"""
    return quote(value, safe="~")


def sorted_keys(parameters: Parameters) -> List[str]:
    # Case-insensitive, ties broken by natural order
    return sorted(parameters, key=lambda key: (key.casefold(), key))


def normalize_parameters(parameters: Parameters) -> str:
    pairs = [f"{key}={oauth_encode(parameters[key])}" for key in sorted_keys(parameters)]
    return "&".join(pairs)


def signature_base_string(method: str, base_url: str, parameters: Parameters) -> str:
    """The string the signature is computed over. Never sent to the server."""
    return "&".join([
        method.upper(),
        oauth_encode(base_url),
        oauth_encode(normalize_parameters(parameters)),
    ])


def signed_url(base_url: str, parameters: Parameters, signature: str) -> str:
    """The request URL with the signature inserted among the parameters."""
    signed = dict(parameters)
    signed[SIGNATURE] = signature
    return f"{base_url}?{normalize_parameters(signed)}"


def authorization_url(authorize_url: str, token: str,
                      permission: AuthenticationPermission) -> str:
    return f"{authorize_url}?{TOKEN}={oauth_encode(token)}&{PERMISSIONS}={permission.value}"


def callback_parameters(callback_url: str) -> Dict[str, str]:
    query = parse_qs(urlparse(callback_url).query, keep_blank_values=True)
    return {key: values[0] for key, values in query.items()}


def extract_verifier(callback_url: str):
    """Look up oauth_verifier in the callback query. None if absent."""
    verifier = callback_parameters(callback_url).get(VERIFIER)
    if not verifier:
        logger.debug("Callback URL carries no oauth_verifier")
        return None
    return verifier
