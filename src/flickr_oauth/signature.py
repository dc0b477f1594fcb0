"""HMAC-SHA1 request signing."""
import base64
import hashlib
import hmac
import logging
from typing import Optional

from .parameters import SIGNATURE, Parameters, oauth_encode, signature_base_string

logger = logging.getLogger(__name__)


def signing_key(consumer_secret: str, token_secret: Optional[str] = None) -> str:
    # The ampersand is present even without a token secret
    return f"{oauth_encode(consumer_secret)}&{oauth_encode(token_secret or '')}"


def hmac_sha1(base_string: str, key: str) -> str:
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_request(method: str, base_url: str, parameters: Parameters,
                 consumer_secret: str, token_secret: Optional[str] = None) -> str:
    """
    Compute oauth_signature for a request.
    Any oauth_signature already in parameters is left out of the base string.
    """
    unsigned = {key: value for key, value in parameters.items() if key != SIGNATURE}
    base_string = signature_base_string(method, base_url, unsigned)
    logger.debug(f"Signing {method.upper()} {base_url} over {len(unsigned)} parameters")
    return hmac_sha1(base_string, signing_key(consumer_secret, token_secret))
