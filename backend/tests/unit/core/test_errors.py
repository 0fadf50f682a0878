"""Problem+JSON rendering of service, validation and unexpected errors."""

from __future__ import annotations

import pytest
from flask import Flask
from marshmallow import ValidationError

from shopauth.core import errors as api_errors
from shopauth.core.config import TestingConfig
from shopauth.core.logger import init_app as init_logging
from shopauth.schemas import RegisterSchema
from shopauth.services._shared.base import BaseService
from shopauth.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    DeliveryError,
    NotFoundError,
    RateLimitError,
    ServiceError,
)


@pytest.fixture()
def error_app() -> Flask:
    """Bare Flask app with only the error and logging layers installed."""
    app = Flask(__name__)
    app.config.from_object(TestingConfig)
    app.config["PROPAGATE_EXCEPTIONS"] = False
    init_logging(app)
    api_errors.init_app(app)

    @app.get("/raise/<kind>")
    def _raise(kind):
        mapping = {
            "conflict": ConflictError("User", "Email already exists"),
            "unauthorized": AuthenticationError("Invalid email or password"),
            "forbidden": AuthorizationError(),
            "missing": NotFoundError("User"),
            "limited": RateLimitError("Password reset limit reached. Try again in 15 minutes."),
            "mail": DeliveryError("Failed to send password reset email"),
            "bad": BadRequestError("Name cannot be empty"),
            "base": ServiceError("Something odd"),
        }
        if kind == "validation":
            RegisterSchema().load({"name": "A"})
        if kind == "bug":
            raise KeyError("internal-detail")
        raise mapping[kind]

    return app


@pytest.mark.parametrize(
    ("kind", "status", "code", "detail"),
    [
        ("conflict", 409, "conflict", "Email already exists"),
        ("unauthorized", 401, "unauthorized", "Invalid email or password"),
        ("forbidden", 403, "forbidden", "Forbidden"),
        ("missing", 404, "not_found", "User not found"),
        ("limited", 429, "too_many_requests", "Password reset limit reached. Try again in 15 minutes."),
        ("mail", 500, "internal_server_error", "Failed to send password reset email"),
        ("bad", 400, "bad_request", "Name cannot be empty"),
        ("base", 400, "bad_request", "Something odd"),
    ],
)
def test_service_errors_become_problems(error_app, kind, status, code, detail):
    resp = error_app.test_client().get(f"/raise/{kind}", headers={"X-Request-ID": "req-1"})

    assert resp.status_code == status
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["status"] == status
    assert body["code"] == code
    assert body["detail"] == detail
    assert body["request_id"] == "req-1"
    assert resp.headers["X-Request-ID"] == "req-1"


def test_validation_error_surfaces_first_message(error_app):
    resp = error_app.test_client().get("/raise/validation")

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert body["detail"] == "Missing data for required field."
    assert "email" in body["details"]["errors"]


def test_unexpected_error_does_not_leak(error_app):
    resp = error_app.test_client().get("/raise/bug")

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["detail"] == "Unexpected error"
    assert "internal-detail" not in resp.get_data(as_text=True)


def test_unknown_route_is_problem_json(error_app):
    resp = error_app.test_client().get("/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["detail"] == "Route '/nowhere' not found"


def test_translate_exceptions_passes_unknown_through():
    service = BaseService()
    err = ValueError("x")
    assert service.translate_exceptions(err) is err
    assert isinstance(service.translate_exceptions(NotFoundError("User")), api_errors.NotFound)


def test_validation_messages_helper():
    assert api_errors._first_message({"a": ["first"], "b": ["second"]}) == "first"
    assert api_errors._first_message({"nested": {"x": ["deep"]}}) == "deep"
    assert api_errors._first_message([]) is None
    assert isinstance(ValidationError("x").messages, list)
