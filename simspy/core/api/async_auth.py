"""
Async authentication service.

Handles login and registration against the SIMS PPOB API.
"""
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .async_client import AsyncAPIClient
from ..exceptions import ValidationError

if TYPE_CHECKING:
    from ..session import SessionManager


EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


@dataclass
class AuthResult:
    """Authentication result."""
    email: str
    token: str


class AsyncAuthService:
    """
    Asynchronous authentication service.

    Login and registration are anonymous calls; a successful login hands
    the token to the session manager. Nothing else is loaded, so a failed
    follow-up fetch cannot leave the session half-initialized.
    """

    MIN_PASSWORD_LENGTH = 8

    def __init__(self, client: AsyncAPIClient, session: 'SessionManager'):
        """
        Initialize auth service.

        Args:
            client: Async API client
            session: Session manager receiving the token
        """
        self._client = client
        self._session = session

    @classmethod
    def _validate_credentials(cls, email: str, password: str, min_length: int = 1) -> str:
        email = (email or '').strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError(f"Invalid email address: {email!r}")
        if not password:
            raise ValidationError("Password is required")
        if len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")
        return email

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Login and start a session.

        Args:
            email: User email
            password: User password

        Returns:
            AuthResult with the issued token

        Raises:
            ValidationError: Malformed email or empty password
            GatewayError: If login fails
        """
        email = self._validate_credentials(email, password)

        data = await self._client.login(email, password)
        token = (data or {}).get('token')
        if not token:
            raise ValidationError("Login response did not contain a token")

        self._session.login(token)

        return AuthResult(email=email, token=token)

    async def register(
        self,
        email: str,
        first_name: str,
        last_name: str,
        password: str
    ) -> None:
        """
        Register a new account. Does not log in.

        Raises:
            ValidationError: Malformed input or password shorter than 8 characters
            GatewayError: If registration fails (e.g. email already used)
        """
        email = self._validate_credentials(email, password, self.MIN_PASSWORD_LENGTH)
        first_name = (first_name or '').strip()
        last_name = (last_name or '').strip()
        if not first_name or not last_name:
            raise ValidationError("First and last name are required")

        await self._client.register(email, first_name, last_name, password)

    def logout(self) -> None:
        """End the session. The service has no logout endpoint."""
        self._session.logout()
