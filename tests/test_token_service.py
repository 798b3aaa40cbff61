"""
Tests for password hashing and JWT issue/verify
"""
from datetime import timedelta

import pytest
from jose import jwt

from app.config import settings
from app.utils.auth import (
    check_password,
    create_access_token,
    get_password_hash,
    hash_password,
    verify_password,
    verify_token,
)
from app.utils.errors import ExpiredToken, InvalidToken


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash('secret1')

        assert hashed != 'secret1'
        assert hashed.startswith('$2')

    def test_verify_password(self):
        hashed = get_password_hash('secret1')

        assert verify_password('secret1', hashed) is True
        assert verify_password('secret2', hashed) is False

    def test_same_password_gets_different_salts(self):
        assert get_password_hash('secret1') != get_password_hash('secret1')

    def test_verify_against_garbage_hash(self):
        assert verify_password('secret1', 'not-a-bcrypt-hash') is False

    @pytest.mark.asyncio
    async def test_async_helpers(self):
        hashed = await hash_password('secret1')

        assert await check_password('secret1', hashed) is True
        assert await check_password('nope', hashed) is False


class TestTokens:

    def test_issue_and_verify(self):
        token = create_access_token('507f1f77bcf86cd799439011', 'a@x.com')

        identity = verify_token(token)

        assert identity.user_id == '507f1f77bcf86cd799439011'
        assert identity.email == 'a@x.com'

    def test_default_expiry_is_seven_days(self):
        token = create_access_token('507f1f77bcf86cd799439011', 'a@x.com')
        claims = jwt.get_unverified_claims(token)

        lifetime = claims['exp'] - jwt.get_unverified_claims(
            create_access_token('x', 'a@x.com', expires_delta=timedelta(0))
        )['exp']

        assert abs(lifetime - 7 * 24 * 3600) <= 2

    def test_expired_token_rejected(self):
        token = create_access_token('507f1f77bcf86cd799439011', 'a@x.com',
                                    expires_delta=timedelta(seconds=-10))

        with pytest.raises(ExpiredToken):
            verify_token(token)

    def test_expired_is_an_invalid_token(self):
        token = create_access_token('u1', 'a@x.com', expires_delta=timedelta(days=-8))

        with pytest.raises(InvalidToken) as exc_info:
            verify_token(token)

        assert exc_info.value.status_code == 403

    def test_wrong_secret_rejected(self):
        token = jwt.encode({'userId': 'u1', 'email': 'a@x.com'}, 'other-secret',
                           algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_malformed_token_rejected(self):
        with pytest.raises(InvalidToken):
            verify_token('not.a.jwt')

    def test_missing_claims_rejected(self):
        token = jwt.encode({'sub': 'a@x.com'}, settings.JWT_SECRET_KEY,
                           algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_expired_and_invalid_share_message(self):
        expired = create_access_token('u1', 'a@x.com', expires_delta=timedelta(seconds=-10))

        with pytest.raises(InvalidToken) as expired_info:
            verify_token(expired)
        with pytest.raises(InvalidToken) as invalid_info:
            verify_token('garbage')

        assert expired_info.value.message == invalid_info.value.message
