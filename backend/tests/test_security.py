"""Tests for password hashing and JWT issue/verify."""

from datetime import datetime, timedelta, timezone

import jwt

from metalflow.core.config import settings
from metalflow.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = get_password_hash("Coil#2024")

        assert hashed.startswith("$argon2")
        assert verify_password("Coil#2024", hashed)
        assert not verify_password("coil#2024", hashed)


class TestAccessToken:
    def test_payload_contents(self):
        token, expires_at = create_access_token(
            7,
            "planner",
            ["Admin", "User"],
            [("Department", "Planning"), ("Site", "North"), ("Site", "South")],
        )

        payload = decode_access_token(token)

        assert payload["sub"] == "7"
        assert payload["name"] == "planner"
        assert payload["role"] == ["Admin", "User"]
        assert payload["Department"] == "Planning"
        assert payload["Site"] == ["North", "South"]
        assert payload["iss"] == settings.JWT_ISSUER
        assert payload["aud"] == settings.JWT_AUDIENCE
        assert payload["jti"]
        assert expires_at > datetime.now(timezone.utc)

    def test_user_claims_cannot_override_registered_claims(self):
        token, _ = create_access_token(7, "planner", [], [("sub", "1"), ("role", "Owner")])

        payload = decode_access_token(token)

        assert payload["sub"] == "7"
        assert payload["role"] == []

    def test_expired_token_rejected(self):
        token, _ = create_access_token(7, "planner", [], [], expires_delta=timedelta(minutes=-1))

        assert decode_access_token(token) is None

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {
                "sub": "7",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
            },
            "another-secret-that-is-long-enough-to-sign",
            algorithm=settings.JWT_ALGORITHM,
        )

        assert decode_access_token(token) is None

    def test_wrong_audience_rejected(self):
        token = jwt.encode(
            {
                "sub": "7",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
                "iss": settings.JWT_ISSUER,
                "aud": "someone-else",
            },
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        assert decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert decode_access_token("not-a-token") is None
