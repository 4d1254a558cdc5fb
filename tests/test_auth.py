"""Registration, login and session-token tests."""

from __future__ import annotations

import datetime as dt

import jwt
import pytest
from pydantic import ValidationError

from matchpledge.auth import TOKEN_LIFETIME, create_token, decode_token
from matchpledge.core.settings import Settings, settings
from matchpledge.errors import CredentialError, Unauthorized
from matchpledge.security import MAX_PASSWORD_BYTES, hash_password, password_fits, verify_password


class TestPasswords:
    def test_hash_roundtrip(self) -> None:
        hashed = hash_password("pw1")

        assert hashed.startswith("$2")
        assert hashed != "pw1"
        assert verify_password("pw1", hashed)
        assert not verify_password("pw2", hashed)

    def test_salted(self) -> None:
        assert hash_password("pw1") != hash_password("pw1")

    def test_malformed_stored_hash_is_infrastructure_error(self) -> None:
        with pytest.raises(CredentialError):
            verify_password("pw1", "not-a-bcrypt-hash")

    def test_length_limit_counts_utf8_bytes(self) -> None:
        assert password_fits("a" * MAX_PASSWORD_BYTES)
        assert not password_fits("a" * (MAX_PASSWORD_BYTES + 1))
        assert not password_fits("\u00e9" * 37)


class TestTokens:
    def test_expiry_is_exactly_24h_after_issue(self) -> None:
        now = dt.datetime(2026, 1, 1, 12, 0, tzinfo=dt.timezone.utc)
        token = create_token(7, "alice", "+1000", now=now)

        claims = jwt.decode(token, options={"verify_signature": False})

        assert claims["sub"] == "7"
        assert claims["username"] == "alice"
        assert claims["phone"] == "+1000"
        assert claims["exp"] - claims["iat"] == int(TOKEN_LIFETIME.total_seconds()) == 86400

    def test_decode_valid_token(self) -> None:
        claims = decode_token(create_token(1, "alice", "+1000"))

        assert claims["username"] == "alice"

    def test_expired_token_rejected_without_grace(self) -> None:
        issued = dt.datetime.now(dt.timezone.utc) - TOKEN_LIFETIME - dt.timedelta(seconds=1)
        token = create_token(1, "alice", "+1000", now=issued)

        with pytest.raises(Unauthorized) as exc_info:
            decode_token(token)
        assert exc_info.value.message == "Token expired"

    def test_tampered_token_rejected(self) -> None:
        token = create_token(1, "alice", "+1000")
        header, payload, signature = token.split(".")
        forged = jwt.encode({"sub": "2", "exp": 9999999999}, "another-secret-0123456789abcdefgh", algorithm="HS256")

        with pytest.raises(Unauthorized):
            decode_token(".".join([header, forged.split(".")[1], signature]))

    def test_missing_token_rejected(self) -> None:
        with pytest.raises(Unauthorized):
            decode_token(None)


class TestSettings:
    def test_missing_secret_is_fatal(self, monkeypatch) -> None:
        monkeypatch.delenv("JWT_SECRET", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_blank_secret_is_fatal(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, JWT_SECRET="   ")

    def test_configured_secret_is_used(self) -> None:
        assert settings.JWT_SECRET


class TestAuthEndpoints:
    @pytest.mark.asyncio
    async def test_register_login_scenario(self, client) -> None:
        first = await client.post(
            "/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "pw1"}
        )
        assert first.status_code == 200
        body = first.json()
        assert body["user"] == {"id": body["user"]["id"], "username": "alice", "phone": "+1000", "balance": 0.0}
        assert "password_hash" not in body["user"]
        assert decode_token(body["token"])["username"] == "alice"

        dup = await client.post(
            "/api/auth/register", json={"username": "alice", "phone": "+2000", "password": "pw2"}
        )
        assert dup.status_code == 409

        wrong = await client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
        assert wrong.status_code == 401

        ok = await client.post("/api/auth/login", json={"username": "alice", "password": "pw1"})
        assert ok.status_code == 200
        claims = decode_token(ok.json()["token"])
        remaining = claims["exp"] - dt.datetime.now(dt.timezone.utc).timestamp()
        assert 86400 - 60 < remaining <= 86400

    @pytest.mark.asyncio
    async def test_duplicate_phone_conflicts(self, client) -> None:
        await client.post("/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "pw1"})

        resp = await client.post(
            "/api/auth/register", json={"username": "bob", "phone": "+1000", "password": "pw2"}
        )

        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_blank_registration_fields_rejected(self, client) -> None:
        resp = await client.post("/api/auth/register", json={"username": " ", "phone": "+1000", "password": "pw"})

        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_look_the_same(self, client) -> None:
        await client.post("/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "pw1"})

        unknown = await client.post("/api/auth/login", json={"username": "nobody", "password": "pw1"})
        wrong = await client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    @pytest.mark.asyncio
    async def test_login_with_phone(self, client) -> None:
        await client.post("/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "pw1"})

        ok = await client.post("/api/auth/login-phone", json={"phone": "+1000", "password": "pw1"})
        bad = await client.post("/api/auth/login-phone", json={"phone": "+9999", "password": "pw1"})

        assert ok.status_code == 200
        assert ok.json()["user"]["username"] == "alice"
        assert bad.status_code == 401

    @pytest.mark.asyncio
    async def test_me_requires_valid_token(self, client) -> None:
        reg = await client.post(
            "/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "pw1"}
        )
        token = reg.json()["token"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        anonymous = await client.get("/api/auth/me")
        garbage = await client.get("/api/auth/me", headers={"Authorization": "Bearer abc.def.ghi"})

        assert me.status_code == 200
        assert me.json()["username"] == "alice"
        assert anonymous.status_code == 401
        assert garbage.status_code == 401

    @pytest.mark.asyncio
    async def test_register_rejects_password_bcrypt_cannot_hold(self, client) -> None:
        resp = await client.post(
            "/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "é" * 37}
        )

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid user data"

    @pytest.mark.asyncio
    async def test_register_accepts_password_at_byte_limit(self, client) -> None:
        resp = await client.post(
            "/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "p" * MAX_PASSWORD_BYTES}
        )

        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_overlong_login_password_is_plain_401(self, client) -> None:
        await client.post("/api/auth/register", json={"username": "alice", "phone": "+1000", "password": "pw1"})
        long_password = "x" * 100

        known = await client.post("/api/auth/login", json={"username": "alice", "password": long_password})
        unknown = await client.post("/api/auth/login", json={"username": "nobody", "password": long_password})
        by_phone = await client.post("/api/auth/login-phone", json={"phone": "+1000", "password": long_password})
        wrong = await client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

        assert known.status_code == unknown.status_code == by_phone.status_code == 401
        assert known.json() == unknown.json() == wrong.json()

    @pytest.mark.asyncio
    async def test_login_identifier_is_trimmed_like_registration(self, client) -> None:
        await client.post("/api/auth/register", json={"username": " alice", "phone": " +1000 ", "password": "pw1"})

        by_name = await client.post("/api/auth/login", json={"username": " alice", "password": "pw1"})
        by_phone = await client.post("/api/auth/login-phone", json={"phone": "+1000 ", "password": "pw1"})

        assert by_name.status_code == 200
        assert by_name.json()["user"]["username"] == "alice"
        assert by_phone.status_code == 200
