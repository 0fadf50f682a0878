"""Factory Boy definition for :class:`shopauth.models.verification_code.VerificationCode`."""

from __future__ import annotations

from datetime import timedelta

import factory

from shopauth.models.verification_code import VerificationCode, VerificationCodeType
from shopauth.services.verification import hash_token
from tests.factories import REFERENCE_NOW, BaseFactory
from tests.factories.user import UserFactory


class VerificationCodeFactory(BaseFactory):
    """
    Persist a code whose bearer secret is the ``token`` parameter.

    Only the digest is stored, so tests keep the ``token`` they passed in
    (or the sequence default ``code-<n>``) to redeem it later.
    """

    class Meta:
        model = VerificationCode

    class Params:
        token = factory.Sequence(lambda n: f"code-{n}")

    user = factory.SubFactory(UserFactory)
    type = VerificationCodeType.EMAIL_VERIFICATION
    token_hash = factory.LazyAttribute(lambda o: hash_token(o.token))
    created_at = REFERENCE_NOW
    expires_at = factory.LazyFunction(lambda: REFERENCE_NOW + timedelta(days=1))
