"""Shared fakes for the Flickr OAuth tests."""
from urllib.parse import parse_qs, urlparse

import pytest

from flickr_oauth.client import FlickrOAuth

CALLBACK_URL = "http://localhost:8787/"

REQUEST_TOKEN_BODY = "oauth_callback_confirmed=true&oauth_token=T1&oauth_token_secret=S1"
ACCESS_TOKEN_BODY = (
    "fullname=Alice%20A&oauth_token=T2&oauth_token_secret=S2"
    "&user_nsid=123&username=alice"
)


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.status_code = status_code


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def query(self, index):
        parsed = urlparse(self.requests[index])
        return {key: values[0] for key, values in parse_qs(parsed.query).items()}

    def base_url(self, index):
        return self.requests[index].split("?", 1)[0]


class FakePresenter:
    def __init__(self, callback_url=None, error=None):
        self.callback_url = callback_url or f"{CALLBACK_URL}?oauth_token=T1&oauth_verifier=V1"
        self.error = error
        self.calls = []

    def present(self, authorization_url, callback_url, cancelled=None):
        self.calls.append((authorization_url, callback_url))
        if self.error is not None:
            raise self.error
        return self.callback_url


@pytest.fixture
def presenter():
    return FakePresenter()


@pytest.fixture
def session():
    return FakeSession(FakeResponse(REQUEST_TOKEN_BODY), FakeResponse(ACCESS_TOKEN_BODY))


@pytest.fixture
def client(session, presenter):
    return FlickrOAuth(
        consumer_key="key",
        consumer_secret="secret",
        callback_url=CALLBACK_URL,
        presenter=presenter,
        session=session,
    )
