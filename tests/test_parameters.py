"""Tests for building and assembling OAuth parameters."""
from unittest.mock import patch

import pytest

from flickr_oauth.auth_state import AuthenticationPermission, HandshakeContext, OAuthState
from flickr_oauth.errors import OAuthSequenceError
from flickr_oauth.parameters import (
    authorization_url,
    extract_verifier,
    generate_nonce,
    generate_request_parameters,
    generate_timestamp,
    normalize_parameters,
    oauth_encode,
    signature_base_string,
    signed_url,
    sorted_keys,
)

PHOTOS_URL = "http://photos.example.net/photos"
PHOTOS_PARAMETERS = {
    "file": "vacation.jpg",
    "size": "original",
    "oauth_consumer_key": "dpf43f3p2l4k3l03",
    "oauth_token": "nnch734d00sl2jdk",
    "oauth_nonce": "kllo9940pd9333jh",
    "oauth_timestamp": "1191242096",
    "oauth_signature_method": "HMAC-SHA1",
    "oauth_version": "1.0",
}


def test_nonce_is_distinct_between_calls():
    assert generate_nonce() != generate_nonce()


def test_timestamp_is_floored_seconds():
    with patch("flickr_oauth.parameters.time.time", return_value=1700000000.9):
        assert generate_timestamp() == "1700000000"


def test_request_token_parameters_carry_callback():
    context = HandshakeContext(permission=AuthenticationPermission.READ)

    parameters = generate_request_parameters(context, "key", "http://localhost:8787/")

    assert parameters["oauth_callback"] == "http://localhost:8787/"
    assert parameters["oauth_consumer_key"] == "key"
    assert parameters["oauth_signature_method"] == "HMAC-SHA1"
    assert parameters["oauth_version"] == "1.0"
    assert "oauth_token" not in parameters
    assert parameters["oauth_timestamp"].isdigit()


def test_access_token_parameters_carry_token():
    context = HandshakeContext(permission=AuthenticationPermission.READ, token="T1")
    context.advance(OAuthState.ACCESS_TOKEN)

    parameters = generate_request_parameters(context, "key", "http://localhost:8787/")

    assert parameters["oauth_token"] == "T1"
    assert "oauth_callback" not in parameters


def test_access_token_parameters_without_token_is_a_sequence_error():
    context = HandshakeContext(permission=AuthenticationPermission.READ)
    context.advance(OAuthState.ACCESS_TOKEN)

    with pytest.raises(OAuthSequenceError):
        generate_request_parameters(context, "key", "http://localhost:8787/")


def test_each_call_regenerates_the_nonce():
    context = HandshakeContext(permission=AuthenticationPermission.READ)

    first = generate_request_parameters(context, "key", "cb")
    second = generate_request_parameters(context, "key", "cb")

    assert first["oauth_nonce"] != second["oauth_nonce"]


def test_oauth_encode_escapes_reserved_characters_only():
    assert oauth_encode("a b&c=d+e") == "a%20b%26c%3Dd%2Be"
    assert oauth_encode("AZaz09-._~") == "AZaz09-._~"
    assert oauth_encode("http://x/y?z") == "http%3A%2F%2Fx%2Fy%3Fz"
    assert oauth_encode("é") == "%C3%A9"


def test_sorted_keys_is_case_insensitive_and_idempotent():
    parameters = {"b": "1", "a": "2", "A": "3", "oauth_Z": "4", "oauth_a": "5"}

    ordered = sorted_keys(parameters)

    assert ordered == ["A", "a", "b", "oauth_a", "oauth_Z"]
    assert sorted_keys({key: parameters[key] for key in ordered}) == ordered


def test_normalize_parameters_encodes_values():
    assert normalize_parameters({"b": "x y", "a": "1=2"}) == "a=1%3D2&b=x%20y"


def test_signature_base_string_matches_reference():
    expected = (
        "GET&http%3A%2F%2Fphotos.example.net%2Fphotos&file%3Dvacation.jpg"
        "%26oauth_consumer_key%3Ddpf43f3p2l4k3l03%26oauth_nonce%3Dkllo9940pd9333jh"
        "%26oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1191242096"
        "%26oauth_token%3Dnnch734d00sl2jdk%26oauth_version%3D1.0%26size%3Doriginal"
    )

    assert signature_base_string("GET", PHOTOS_URL, PHOTOS_PARAMETERS) == expected


def test_signed_url_inserts_signature_and_leaves_base_url_alone():
    url = signed_url("https://example.com/oauth", {"oauth_nonce": "n", "b": "x y"}, "ab+/=")

    assert url == "https://example.com/oauth?b=x%20y&oauth_nonce=n&oauth_signature=ab%2B%2F%3D"


def test_authorization_url():
    url = authorization_url("https://www.flickr.com/services/oauth/authorize", "T1",
                            AuthenticationPermission.DELETE)

    assert url == "https://www.flickr.com/services/oauth/authorize?oauth_token=T1&perms=delete"


def test_extract_verifier_by_key_not_position():
    assert extract_verifier("http://localhost:8787/?oauth_verifier=V1&oauth_token=T1") == "V1"
    assert extract_verifier("http://localhost:8787/?oauth_token=T1&oauth_verifier=V1") == "V1"
    assert extract_verifier("http://localhost:8787/?a=1&b=2&oauth_verifier=V1") == "V1"


def test_extract_verifier_missing():
    assert extract_verifier("http://localhost:8787/?oauth_token=T1") is None
    assert extract_verifier("http://localhost:8787/") is None
