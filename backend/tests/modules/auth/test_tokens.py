import pytest
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

from modules.auth.tokens import (
    CALLBACK_PATH,
    build_verification_url,
    create_csrf_token,
    generate_token,
    hash_token,
    normalize_email,
    resolve_redirect,
    token_expiry,
    verify_csrf_token,
)


SECRET = "token-secret"


class TestTokens:
    def test_generate_token_is_random_hex(self):
        first, second = generate_token(), generate_token()
        assert first != second
        assert len(first) == 64
        int(first, 16)

    def test_hash_is_deterministic_and_salted(self):
        assert hash_token("abc", SECRET) == hash_token("abc", SECRET)
        assert hash_token("abc", SECRET) != hash_token("abc", "other-secret")
        assert hash_token("abc", SECRET) != "abc"

    def test_expiry_is_24_hours_out(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert token_expiry(now, 24 * 60 * 60) == now + timedelta(hours=24)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("user@example.com", "user@example.com"),
            ("  User@Example.COM ", "user@example.com"),
        ],
    )
    def test_normalize_email(self, raw, expected):
        assert normalize_email(raw) == expected


class TestBuildVerificationUrl:
    def test_url_shape(self):
        url = build_verification_url(
            "http://localhost:3000/", "tok", "user@example.com", "http://localhost:3000/dashboard"
        )
        parts = urlsplit(url)

        assert f"{parts.scheme}://{parts.netloc}" == "http://localhost:3000"
        assert parts.path == CALLBACK_PATH
        assert parse_qs(parts.query) == {
            "callbackUrl": ["http://localhost:3000/dashboard"],
            "token": ["tok"],
            "email": ["user@example.com"],
        }


class TestResolveRedirect:
    BASE = "http://localhost:3000"

    @pytest.mark.parametrize(
        "url,expected",
        [
            (None, "http://localhost:3000"),
            ("", "http://localhost:3000"),
            ("/dashboard", "http://localhost:3000/dashboard"),
            ("http://localhost:3000/analysis/1", "http://localhost:3000/analysis/1"),
            ("https://evil.example/steal", "http://localhost:3000"),
            ("//evil.example/steal", "http://localhost:3000"),
        ],
    )
    def test_only_same_origin_targets(self, url, expected):
        assert resolve_redirect(url, self.BASE) == expected


class TestCSRF:
    def test_issued_token_verifies(self):
        token, cookie = create_csrf_token(SECRET)
        assert cookie.startswith(f"{token}|")
        assert verify_csrf_token(cookie, token, SECRET) is True

    def test_mismatched_submission(self):
        _, cookie = create_csrf_token(SECRET)
        other, _ = create_csrf_token(SECRET)
        assert verify_csrf_token(cookie, other, SECRET) is False

    def test_forged_cookie(self):
        assert verify_csrf_token("abc|not-the-hash", "abc", SECRET) is False

    def test_cookie_from_other_secret(self):
        token, cookie = create_csrf_token("other-secret")
        assert verify_csrf_token(cookie, token, SECRET) is False

    @pytest.mark.parametrize("cookie,submitted", [(None, "x"), ("x|y", None), ("no-separator", "no-separator")])
    def test_missing_parts(self, cookie, submitted):
        assert verify_csrf_token(cookie, submitted, SECRET) is False
