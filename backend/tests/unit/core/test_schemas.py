"""Unit tests for the marshmallow boundary schemas."""

from __future__ import annotations

import pytest
from marshmallow import ValidationError

from shopauth.models.user import Role
from shopauth.schemas import (
    ChangeNameSchema,
    ChangePasswordSchema,
    ForgotPasswordSchema,
    LoginSchema,
    OAuthProfileSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenResponseSchema,
    UserSchema,
    VerificationCodeSchema,
)
from shopauth.services.auth.dto import (
    LoginIn,
    OAuthProfileIn,
    RegisterIn,
    ResetPasswordIn,
    UserOut,
)


class TestRegisterSchema:
    def test_loads_dto_with_trimmed_and_normalized_fields(self):
        dto = RegisterSchema().load(
            {
                "name": "  Alice ",
                "email": " Alice@Example.com ",
                "password": "secret1",
                "confirm_password": "secret1",
            }
        )
        assert dto == RegisterIn(name="Alice", email="alice@example.com", password="secret1")

    def test_passwords_must_match(self):
        with pytest.raises(ValidationError) as exc:
            RegisterSchema().load(
                {
                    "name": "Alice",
                    "email": "alice@example.com",
                    "password": "secret1",
                    "confirm_password": "secret2",
                }
            )
        assert exc.value.messages == {"confirm_password": ["Passwords do not match"]}

    def test_short_password(self):
        with pytest.raises(ValidationError) as exc:
            RegisterSchema().load(
                {"name": "A", "email": "a@example.com", "password": "123", "confirm_password": "123"}
            )
        assert "password" in exc.value.messages

    def test_blank_name(self):
        with pytest.raises(ValidationError) as exc:
            RegisterSchema().load(
                {
                    "name": "   ",
                    "email": "a@example.com",
                    "password": "secret1",
                    "confirm_password": "secret1",
                }
            )
        assert exc.value.messages["name"] == ["name is required"]


class TestOtherSchemas:
    def test_login(self):
        dto = LoginSchema().load({"email": "BOB@example.com", "password": "secret1"})
        assert dto == LoginIn(email="bob@example.com", password="secret1")

    def test_login_rejects_bad_email(self):
        with pytest.raises(ValidationError) as exc:
            LoginSchema().load({"email": "nope", "password": "secret1"})
        assert "email" in exc.value.messages

    def test_change_name_and_password(self):
        assert ChangeNameSchema().load({"name": " Zed "}) == {"name": "Zed"}
        data = ChangePasswordSchema().load({"current_password": "x", "new_password": "secret2"})
        assert data["new_password"] == "secret2"
        with pytest.raises(ValidationError):
            ChangePasswordSchema().load({"current_password": "", "new_password": "secret2"})

    def test_forgot_password(self):
        assert ForgotPasswordSchema().load({"email": "A@B.io"}) == {"email": "a@b.io"}

    def test_verification_code_length(self):
        assert VerificationCodeSchema().load({"code": " abc "}) == {"code": "abc"}
        with pytest.raises(ValidationError):
            VerificationCodeSchema().load({"code": "x" * 129})
        with pytest.raises(ValidationError):
            VerificationCodeSchema().load({"code": ""})

    def test_reset_password(self):
        dto = ResetPasswordSchema().load(
            {"password": "secret1", "confirm_password": "secret1", "code": "abc"}
        )
        assert dto == ResetPasswordIn(password="secret1", code="abc")

    def test_oauth_profile(self):
        dto = OAuthProfileSchema().load({"email": "X@Example.com", "provider": "google"})
        assert dto == OAuthProfileIn(email="x@example.com", provider="google")

    def test_token_response(self):
        dumped = TokenResponseSchema().dump({"access_token": "a", "refresh_token": None})
        assert dumped == {"access_token": "a", "refresh_token": None, "token_type": "bearer"}


def test_user_schema_never_exposes_password_hash():
    out = UserOut(
        id="u1",
        name="Alice",
        email="alice@example.com",
        photo=None,
        role=Role.SELLER,
        verified=True,
    )
    dumped = UserSchema().dump(out)
    assert dumped["role"] == "SELLER"
    assert "password_hash" not in dumped
