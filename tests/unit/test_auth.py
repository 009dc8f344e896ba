"""Tests for AsyncAuthService."""
from unittest.mock import AsyncMock

import pytest

from simspy.core.api import ApplicationError, AsyncAuthService, AuthResult
from simspy.core.exceptions import ValidationError


class TestAsyncAuthService:
    """Test suite for AsyncAuthService."""

    @pytest.fixture
    def mock_client(self):
        client = AsyncMock()
        client.login = AsyncMock(return_value={'token': 'abc'})
        client.register = AsyncMock(return_value=None)
        return client

    @pytest.fixture
    def auth(self, mock_client, session):
        return AsyncAuthService(mock_client, session)

    @pytest.mark.asyncio
    async def test_login_starts_session(self, auth, session, mock_client):
        result = await auth.login('User@Nutech.test ', 'password123')

        assert result == AuthResult(email='user@nutech.test', token='abc')
        assert session.current_token() == 'abc'
        mock_client.login.assert_awaited_once_with('user@nutech.test', 'password123')

    @pytest.mark.asyncio
    async def test_login_loads_nothing_else(self, auth, mock_client):
        await auth.login('user@nutech.test', 'password123')

        mock_client.get_profile.assert_not_called()
        mock_client.get_balance.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_login_leaves_anonymous(self, auth, session, mock_client):
        mock_client.login.side_effect = ApplicationError('Username atau password salah', 103, 401)

        with pytest.raises(ApplicationError):
            await auth.login('user@nutech.test', 'password123')

        assert session.is_authenticated() is False

    @pytest.mark.asyncio
    async def test_missing_token_is_rejected(self, auth, session, mock_client):
        mock_client.login.return_value = {}

        with pytest.raises(ValidationError):
            await auth.login('user@nutech.test', 'password123')

        assert session.is_authenticated() is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize('email, password', [
        ('not-an-email', 'password123'),
        ('user@nutech.test', ''),
        ('', 'password123'),
        ('user@nutech.test', None),
    ])
    async def test_invalid_credentials_never_sent(self, auth, mock_client, email, password):
        with pytest.raises(ValidationError):
            await auth.login(email, password)

        mock_client.login.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_accepts_short_password(self, auth, session, mock_client):
        result = await auth.login('user@nutech.test', 'pass12')

        mock_client.login.assert_awaited_once_with('user@nutech.test', 'pass12')
        assert result.token == 'abc'
        assert session.is_authenticated() is True

    @pytest.mark.asyncio
    async def test_register_requires_eight_character_password(self, auth, mock_client):
        with pytest.raises(ValidationError):
            await auth.register('new@nutech.test', 'New', 'User', 'pass123')

        mock_client.register.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_does_not_log_in(self, auth, session, mock_client):
        await auth.register('new@nutech.test', 'New', 'User', 'password123')

        mock_client.register.assert_awaited_once_with(
            'new@nutech.test', 'New', 'User', 'password123'
        )
        assert session.is_authenticated() is False

    @pytest.mark.asyncio
    async def test_register_requires_names(self, auth, mock_client):
        with pytest.raises(ValidationError):
            await auth.register('new@nutech.test', '', 'User', 'password123')

        mock_client.register.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth, mock_client):
        mock_client.register.side_effect = ApplicationError('Email sudah terdaftar', 102, 400)

        with pytest.raises(ApplicationError) as exc_info:
            await auth.register('taken@nutech.test', 'New', 'User', 'password123')

        assert exc_info.value.message == 'Email sudah terdaftar'

    def test_logout(self, auth, session):
        session.login('abc')

        auth.logout()

        assert session.is_authenticated() is False
