"""Configuration and token storage backed by the OS keyring."""
import json
import logging
from dataclasses import dataclass
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .presenter import DEFAULT_AUTHORIZATION_TIMEOUT
from .result import FlickrUser, OAuthSuccess

logger = logging.getLogger(__name__)

CONFIG_SERVICE_NAME = "flickr_oauth"
CONSUMER_KEY_NAME = "consumer_key"
CONSUMER_SECRET_NAME = "consumer_secret"
CALLBACK_URL_NAME = "callback_url"
TOKEN_NAME = "access_token"

DEFAULT_CALLBACK_URL = "http://localhost:8787/"
DEFAULT_REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class FlickrOAuthConfig:
    consumer_key: str
    consumer_secret: str
    callback_url: str = DEFAULT_CALLBACK_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    authorization_timeout: float = DEFAULT_AUTHORIZATION_TIMEOUT


def load_config(service_name: str = CONFIG_SERVICE_NAME) -> Optional[FlickrOAuthConfig]:
    """Load the consumer credentials from secure storage."""
    try:
        logger.debug("Loading configuration from keyring")
        consumer_key = keyring.get_password(service_name, CONSUMER_KEY_NAME)
        consumer_secret = keyring.get_password(service_name, CONSUMER_SECRET_NAME)
        callback_url = keyring.get_password(service_name, CALLBACK_URL_NAME)
    except KeyringError as e:
        logger.error(f"Error loading configuration: {str(e)}")
        return None

    if not consumer_key or not consumer_secret:
        logger.debug("No consumer credentials found in keyring")
        return None

    return FlickrOAuthConfig(
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        callback_url=callback_url or DEFAULT_CALLBACK_URL,
    )


def save_config(config: FlickrOAuthConfig, service_name: str = CONFIG_SERVICE_NAME) -> bool:
    """Save the consumer credentials to secure storage."""
    try:
        logger.debug("Saving configuration to keyring")
        keyring.set_password(service_name, CONSUMER_KEY_NAME, config.consumer_key)
        keyring.set_password(service_name, CONSUMER_SECRET_NAME, config.consumer_secret)
        keyring.set_password(service_name, CALLBACK_URL_NAME, config.callback_url)
        return True
    except KeyringError as e:
        logger.error(f"Error saving configuration: {str(e)}")
        return False


class TokenStore:
    """Keeps an authorized token pair and its user in the keyring."""

    def __init__(self, service_name: str = CONFIG_SERVICE_NAME):
        self.service_name = service_name

    def save(self, result: OAuthSuccess) -> bool:
        payload = json.dumps({
            "token": result.token,
            "token_secret": result.token_secret,
            "user": {
                "fullname": result.user.fullname,
                "username": result.user.username,
                "user_id": result.user.user_id,
            },
        })
        try:
            keyring.set_password(self.service_name, TOKEN_NAME, payload)
        except KeyringError as e:
            logger.error(f"Error saving access token: {str(e)}")
            return False
        logger.info(f"Stored access token for {result.user.username}")
        return True

    def load(self) -> Optional[OAuthSuccess]:
        try:
            payload = keyring.get_password(self.service_name, TOKEN_NAME)
        except KeyringError as e:
            logger.error(f"Error loading access token: {str(e)}")
            return None
        if not payload:
            return None

        try:
            data = json.loads(payload)
            return OAuthSuccess(
                token=data["token"],
                token_secret=data["token_secret"],
                user=FlickrUser(**data["user"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable stored token: {str(e)}")
            return None

    def clear(self):
        try:
            keyring.delete_password(self.service_name, TOKEN_NAME)
        except PasswordDeleteError:
            logger.debug("No stored access token to clear")
