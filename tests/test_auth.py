"""Tests for the auth module (signing logic)."""

import hashlib
import hmac

import pytest

from tuya_cloud.auth import (
    SignatureOptions,
    build_string_to_sign,
    check_method,
    encode_query,
    sign,
    sign_request,
)
from tuya_cloud.config import TuyaConfig
from tuya_cloud.errors import TuyaContractError

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _config() -> TuyaConfig:
    return TuyaConfig(access_id="test_id", access_secret="test_secret", api_region="us")


class TestBuildStringToSign:
    def test_layout(self):
        s = build_string_to_sign("GET", "/v1.0/devices")
        assert s == f"GET\n{EMPTY_SHA256}\n\n/v1.0/devices"

    def test_empty_body_hashes_zero_bytes(self):
        s = build_string_to_sign("POST", "/v1.0/devices", body=b"")
        assert s.split("\n")[1] == hashlib.sha256(b"").hexdigest() == EMPTY_SHA256

    def test_body_hash_matches_exact_bytes(self):
        body = b'{"commands":[{"code":"switch_1","value":true}]}'
        s = build_string_to_sign("POST", "/v1.0/devices/abc/commands", body=body)
        assert s.split("\n")[1] == hashlib.sha256(body).hexdigest()

    def test_query_keys_are_sorted(self):
        s = build_string_to_sign(
            "GET", "/v1.0/devices", {"size": "20", "a_key": "x", "Zeta": "1", "b": "2"},
        )
        assert s.endswith("/v1.0/devices?Zeta=1&a_key=x&b=2&size=20")

    def test_query_order_independent_of_insertion(self):
        s1 = build_string_to_sign("GET", "/p", {"b": "2", "a": "1"})
        s2 = build_string_to_sign("GET", "/p", {"a": "1", "b": "2"})
        assert s1 == s2

    def test_unsorted_variant_keeps_insertion_order(self):
        s = build_string_to_sign("GET", "/p", {"b": "2", "a": "1"}, sort_params=False)
        assert s.endswith("/p?b=2&a=1")

    def test_no_question_mark_without_params(self):
        assert "?" not in build_string_to_sign("GET", "/p", {})

    def test_method_is_upper_cased(self):
        assert build_string_to_sign("delete", "/p").startswith("DELETE\n")

    def test_unsupported_method_raises(self):
        with pytest.raises(TuyaContractError, match="PATCH"):
            build_string_to_sign("PATCH", "/p")


class TestEncodeQuery:
    def test_url_encodes_values(self):
        assert encode_query({"q": "a b&c"}) == "q=a+b%26c"

    def test_drops_none_values(self):
        assert encode_query({"a": "1", "last_row_key": None}) == "a=1"

    def test_empty(self):
        assert encode_query(None) == ""

    def test_booleans_are_lowercase(self):
        assert encode_query({"online": True, "sub": False}) == "online=true&sub=false"

    def test_boolean_signed_as_sent(self):
        s = build_string_to_sign("GET", "/v1.0/devices", {"online": True})
        assert s.endswith("/v1.0/devices?online=true")


class TestSign:
    def test_matches_hmac_sha256_lowercase(self):
        expected = hmac.new(b"secret", b"payload", hashlib.sha256).hexdigest()
        assert sign("payload", "secret") == expected

    def test_token_is_appended_to_key(self):
        expected = hmac.new(b"secrettok", b"payload", hashlib.sha256).hexdigest()
        assert sign("payload", "secret", "tok") == expected

    def test_uppercase_variant(self):
        assert sign("payload", "secret", uppercase=True) == sign("payload", "secret").upper()

    def test_sign_is_deterministic(self):
        assert sign("payload", "secret", "tok") == sign("payload", "secret", "tok")

    @pytest.mark.parametrize(
        "other",
        [
            ("payload2", "secret", "tok"),
            ("payload", "secret2", "tok"),
            ("payload", "secret", "tok2"),
            ("payload", "secret", None),
        ],
    )
    def test_sign_changes_with_any_input(self, other):
        assert sign("payload", "secret", "tok") != sign(*other)


class TestCheckMethod:
    @pytest.mark.parametrize("method", ["get", "POST", "Put", "delete"])
    def test_supported(self, method):
        assert check_method(method) == method.upper()

    def test_unsupported(self):
        with pytest.raises(TuyaContractError):
            check_method("HEAD")


class TestSignRequest:
    def test_returns_required_headers(self):
        cfg = _config()
        headers = sign_request(
            cfg, "GET", "/v1.0/token", params={"grant_type": "1"}, t=1000, nonce="abc",
        )
        assert headers["client_id"] == "test_id"
        assert headers["sign_method"] == "HMAC-SHA256"
        assert headers["t"] == "1000"
        assert headers["nonce"] == "abc"
        # No access_token header when token is empty.
        assert "access_token" not in headers
        expected = sign(
            build_string_to_sign("GET", "/v1.0/token", {"grant_type": "1"}), "test_secret",
        )
        assert headers["sign"] == expected

    def test_includes_access_token_when_provided(self):
        cfg = _config()
        headers = sign_request(
            cfg, "GET", "/v1.0/devices/123", access_token="tok_abc", t=2000, nonce="def"
        )
        assert headers["access_token"] == "tok_abc"
        expected = sign(
            build_string_to_sign("GET", "/v1.0/devices/123"), "test_secret", "tok_abc",
        )
        assert headers["sign"] == expected

    def test_sign_is_deterministic(self):
        cfg = _config()
        h1 = sign_request(cfg, "GET", "/v1.0/token", t=5000, nonce="nonce1")
        h2 = sign_request(cfg, "GET", "/v1.0/token", t=5000, nonce="nonce1")
        assert h1["sign"] == h2["sign"]

    def test_sign_changes_with_method(self):
        cfg = _config()
        h_get = sign_request(cfg, "GET", "/v1.0/devices", t=5000, nonce="n")
        h_post = sign_request(cfg, "POST", "/v1.0/devices", t=5000, nonce="n")
        assert h_get["sign"] != h_post["sign"]

    def test_sign_changes_with_body(self):
        cfg = _config()
        h1 = sign_request(cfg, "POST", "/v1.0/devices", body=b"", t=5000, nonce="n")
        h2 = sign_request(cfg, "POST", "/v1.0/devices", body=b'{"a":1}', t=5000, nonce="n")
        assert h1["sign"] != h2["sign"]

    def test_default_nonce_and_timestamp(self):
        headers = sign_request(_config(), "GET", "/v1.0/devices")
        assert len(headers["nonce"]) == 16
        assert headers["t"].isdigit() and len(headers["t"]) == 13

    def test_uppercase_option(self):
        headers = sign_request(
            _config(), "GET", "/p", t=1, nonce="n", options=SignatureOptions(uppercase=True),
        )
        assert headers["sign"] == headers["sign"].upper()
