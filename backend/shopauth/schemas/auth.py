"""Authentication-related Marshmallow schemas.

Inputs are validated here, before any store access; string fields are
trimmed. Loading the flow schemas yields the service DTOs directly.
"""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from shopauth.services.auth.dto import (
    LoginIn,
    OAuthProfileIn,
    RegisterIn,
    ResetPasswordIn,
)

PASSWORD_LENGTH = validate.Length(min=6, max=255, error="password must be at least 6 characters")
CODE_LENGTH = validate.Length(min=1, max=128)


class TrimmedString(fields.String):
    """String field that strips surrounding whitespace on load."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        return super()._deserialize(value, attr, data, **kwargs).strip()


class NormalizedEmail(fields.Email):
    """Email field that trims and lowercases on load."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        return super()._deserialize(value, attr, data, **kwargs).strip().lower()


def _passwords_match(data: dict[str, Any]) -> None:
    if data.get("password") != data.get("confirm_password"):
        raise ValidationError("Passwords do not match", field_name="confirm_password")


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = NormalizedEmail(required=True, validate=validate.Length(min=1, max=255))
    password = fields.String(required=True, validate=PASSWORD_LENGTH)
    user_agent = TrimmedString(load_default=None, allow_none=True, validate=validate.Length(max=512))

    @post_load
    def make_dto(self, data: dict[str, Any], **kwargs: Any) -> LoginIn:
        return LoginIn(**data)


class RegisterSchema(Schema):
    """Input payload for account registration."""

    name = TrimmedString(
        required=True, validate=validate.Length(min=1, max=255, error="name is required")
    )
    email = NormalizedEmail(required=True, validate=validate.Length(min=1, max=255))
    password = fields.String(required=True, validate=PASSWORD_LENGTH)
    confirm_password = fields.String(required=True, load_only=True, validate=PASSWORD_LENGTH)
    user_agent = TrimmedString(load_default=None, allow_none=True, validate=validate.Length(max=512))

    @validates_schema
    def check_passwords(self, data: dict[str, Any], **kwargs: Any) -> None:
        _passwords_match(data)

    @post_load
    def make_dto(self, data: dict[str, Any], **kwargs: Any) -> RegisterIn:
        data.pop("confirm_password", None)
        return RegisterIn(**data)


class ChangeNameSchema(Schema):
    name = TrimmedString(
        required=True, validate=validate.Length(min=1, max=255, error="name is required")
    )


class ChangePasswordSchema(Schema):
    """Input payload for changing the password of the signed-in user."""

    current_password = fields.String(
        required=True,
        validate=validate.Length(min=1, max=255, error="old password is required"),
    )
    new_password = fields.String(required=True, validate=PASSWORD_LENGTH)


class ForgotPasswordSchema(Schema):
    email = NormalizedEmail(required=True, validate=validate.Length(min=1, max=255))


class VerificationCodeSchema(Schema):
    """A one-time code as it arrives in a link (path or query)."""

    code = TrimmedString(required=True, validate=CODE_LENGTH)


class ResetPasswordSchema(Schema):
    """Input payload for redeeming a password-reset code."""

    password = fields.String(required=True, validate=PASSWORD_LENGTH)
    confirm_password = fields.String(required=True, load_only=True, validate=PASSWORD_LENGTH)
    code = TrimmedString(required=True, validate=CODE_LENGTH)

    @validates_schema
    def check_passwords(self, data: dict[str, Any], **kwargs: Any) -> None:
        _passwords_match(data)

    @post_load
    def make_dto(self, data: dict[str, Any], **kwargs: Any) -> ResetPasswordIn:
        return ResetPasswordIn(password=data["password"], code=data["code"])


class OAuthProfileSchema(Schema):
    """Profile fields taken from an OAuth provider callback."""

    email = NormalizedEmail(load_default=None, allow_none=True)
    name = TrimmedString(load_default=None, allow_none=True, validate=validate.Length(max=255))
    photo = fields.Url(load_default=None, allow_none=True)
    provider = TrimmedString(load_default="oauth", validate=validate.Length(min=1, max=32))
    user_agent = TrimmedString(load_default=None, allow_none=True, validate=validate.Length(max=512))

    @post_load
    def make_dto(self, data: dict[str, Any], **kwargs: Any) -> OAuthProfileIn:
        return OAuthProfileIn(**data)


class TokenResponseSchema(Schema):
    """Response payload carrying the token pair (refresh may be absent)."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(allow_none=True)
    token_type = fields.String(dump_default="bearer")
