"""Parser for Flickr's ampersand delimited OAuth responses."""
import logging
from typing import Dict, Optional
from urllib.parse import unquote

from .auth_state import OAuthState
from .errors import (
    AccessTokenError,
    MalformedResponseError,
    RequestTokenNotConfirmedError,
)
from .result import FlickrUser

logger = logging.getLogger(__name__)

CALLBACK_CONFIRMED = "oauth_callback_confirmed"
TOKEN = "oauth_token"
TOKEN_SECRET = "oauth_token_secret"
USERNAME = "username"
USER_ID = "user_nsid"
FULLNAME = "fullname"
PROBLEM = "oauth_problem"

REQUEST_TOKEN_NOT_CONFIRMED = "Failed to get a request token. OAuth status is not confirmed."
ACCESS_TOKEN_FAILED = "Failed to get an access token."


def decode_body(content: Optional[bytes]) -> str:
    if content is None:
        raise MalformedResponseError("Could not get response string.")
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedResponseError("Could not get response string.") from e


def parse_response(body: str) -> Dict[str, str]:
    """
    Split key1=value1&key2=value2 into a dict.
    Only the first '=' of a segment separates key from value; segments
    without one are skipped.
    """
    parameters = {}
    for segment in body.strip().split("&"):
        key, separator, value = segment.partition("=")
        if not separator or not key:
            if segment:
                logger.debug(f"Skipping response segment without '=': {segment[:50]}")
            continue
        parameters[key] = unquote(value)
    return parameters


def is_truthy(value: str) -> bool:
    # Leading t/y or a non-zero digit counts as true
    first = value.strip()[:1].lower()
    return first != "" and first in "ty123456789"


def problem_description(parameters: Dict[str, str]) -> Optional[str]:
    return parameters.get(PROBLEM)


def validate_response(state: OAuthState, parameters: Dict[str, str]):
    """Raise if the parsed response is not acceptable for state."""
    if state is OAuthState.REQUEST_TOKEN:
        confirmed = parameters.get(CALLBACK_CONFIRMED)
        if confirmed is None or not is_truthy(confirmed):
            raise RequestTokenNotConfirmedError(REQUEST_TOKEN_NOT_CONFIRMED)
        if not parameters.get(TOKEN) or TOKEN_SECRET not in parameters:
            raise RequestTokenNotConfirmedError(
                f"{REQUEST_TOKEN_NOT_CONFIRMED} Response carried no token pair."
            )
    else:
        username = parameters.get(USERNAME)
        if not username or USER_ID not in parameters or FULLNAME not in parameters:
            raise AccessTokenError(ACCESS_TOKEN_FAILED)
        if not parameters.get(TOKEN) or TOKEN_SECRET not in parameters:
            raise AccessTokenError(f"{ACCESS_TOKEN_FAILED} Response carried no token pair.")


def user_from_response(parameters: Dict[str, str]) -> FlickrUser:
    return FlickrUser(
        fullname=parameters[FULLNAME],
        username=parameters[USERNAME],
        user_id=parameters[USER_ID],
    )
