"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from shopauth.models.user import Role


class UserSchema(Schema):
    """Public representation of a user (``UserOut`` or ``User``); never the hash."""

    id = fields.String(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    photo = fields.String(allow_none=True)
    role = fields.Enum(Role, by_value=True, required=True)
    verified = fields.Boolean(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
