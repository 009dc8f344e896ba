"""
Account mutation flows.

Top-up, payment, profile edit and avatar upload. Each flow writes the
server's post-mutation state into the resource cache before returning,
so callers never need a second round trip to see the effect.
"""
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union, TYPE_CHECKING

from .file_service import FileValidator, AsyncFileReader
from ..api.config import APIConfig
from ..api.errors import GatewayError
from ..exceptions import StaleResponseError, ValidationError
from ..logging import get_logger
from ..resources.models import Balance, Profile, TransactionType, parse_timestamp

if TYPE_CHECKING:
    from ..api import AsyncAPIClient
    from ..resources import ResourceCache
    from ..session import SessionManager


@dataclass(frozen=True)
class PaymentResult:
    """
    Outcome of a service payment.

    Attributes:
        service_code: Paid service
        service_name: Display name of the service
        amount: Charged amount in minor units
        invoice_number: Invoice reference (when returned)
        created_at: Transaction time (when returned)
        balance: Balance after the payment, as held in the cache; None when
            it could not be read back
    """
    service_code: str
    service_name: str
    amount: int
    invoice_number: Optional[str] = None
    created_at: Optional[datetime] = None
    balance: Optional[Balance] = None
    type: TransactionType = TransactionType.PAYMENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any], balance: Optional[Balance] = None) -> 'PaymentResult':
        created_on = data.get('created_on')
        return cls(
            service_code=data.get('service_code', ''),
            service_name=data.get('service_name', ''),
            amount=int(data.get('total_amount', 0)),
            invoice_number=data.get('invoice_number'),
            created_at=parse_timestamp(created_on) if created_on else None,
            balance=balance,
        )


class AccountService:
    """
    Mutating account operations.

    Client-side preconditions (top-up range, sufficient cached balance,
    avatar size and type) raise ``ValidationError`` before any request is
    sent. A mutation whose response arrives after the session ended raises
    ``StaleResponseError`` and writes nothing into the cache.

    Example:
        >>> account = AccountService(api, session, cache)
        >>> await account.top_up(50_000)
        Balance(amount=150000)
        >>> cache.get_balance()
        Balance(amount=150000)
    """

    AVATAR_EXTENSIONS = ('.jpg', '.jpeg', '.png')

    def __init__(
        self,
        api: 'AsyncAPIClient',
        session: 'SessionManager',
        cache: 'ResourceCache',
        config: Optional[APIConfig] = None,
        validator: Optional[FileValidator] = None,
        reader: Optional[AsyncFileReader] = None
    ):
        """
        Initialize account service.

        Args:
            api: API gateway
            session: Shared session manager
            cache: Resource cache receiving write-throughs
            config: Limits (top-up range, avatar size); defaults if omitted
            validator: Avatar file validator
            reader: Async file reader for the avatar
        """
        self._api = api
        self._session = session
        self._cache = cache
        self._config = config or api.config
        self._validator = validator or FileValidator()
        self._reader = reader or AsyncFileReader()
        self._logger = get_logger('simspy.account')

    def _ensure_current(self, generation: int, operation: str) -> None:
        if self._session.generation != generation:
            self._logger.warning(f"{operation} completed after session ended; result not cached")
            raise StaleResponseError(generation, self._session.generation)

    async def top_up(self, amount: int) -> Balance:
        """
        Add funds to the balance.

        Args:
            amount: Amount in minor units

        Returns:
            New balance (already written to the cache)

        Raises:
            ValidationError: Amount is not an integer or out of range
            GatewayError: Request failed
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError(f"Top-up amount must be an integer, got {amount!r}")

        low, high = self._config.min_top_up_amount, self._config.max_top_up_amount
        if not low <= amount <= high:
            raise ValidationError(f"Top-up amount must be between {low} and {high}, got {amount}")

        generation = self._session.generation
        data = await self._api.top_up(amount)
        self._ensure_current(generation, 'Top-up')

        balance = self._cache.apply_balance(Balance.from_dict(data))
        self._logger.info(f"Top-up of {amount} succeeded, balance {balance.amount}")
        return balance

    async def pay(self, service_code: str) -> PaymentResult:
        """
        Pay for a service.

        When both the balance and the service are cached, an insufficient
        balance is rejected locally. Otherwise the server decides.

        Args:
            service_code: Code of the service to pay

        Returns:
            Payment result carrying the new balance (None if it could not be
            fetched after the charge)

        Raises:
            ValidationError: Cached balance is below the service tariff
            GatewayError: Request failed
        """
        if not service_code:
            raise ValidationError("Service code is required")

        service = self._cache.find_service(service_code)
        balance = self._cache.get_balance()
        if service is not None and balance is not None and balance.amount < service.tariff:
            raise ValidationError(
                f"Insufficient balance for {service.name}: {balance.amount} < {service.tariff}"
            )

        generation = self._session.generation
        data = await self._api.pay(service_code) or {}
        self._ensure_current(generation, 'Payment')

        if 'balance' in data:
            new_balance = self._cache.apply_balance(Balance.from_dict(data))
        else:
            # Already charged: a failed balance read still reports success
            try:
                new_balance = await self._cache.refresh_balance()
            except GatewayError as e:
                self._logger.warning(f"Payment for {service_code} succeeded but balance refresh failed: {e}")
                new_balance = None

        result = PaymentResult.from_dict(data, balance=new_balance)
        self._logger.info(f"Payment for {service_code} succeeded")
        return result

    async def update_profile(self, first_name: str, last_name: str) -> Profile:
        """
        Change the user's name.

        Returns:
            Updated profile (already written to the cache)

        Raises:
            ValidationError: A name is empty
            GatewayError: Request failed
        """
        first_name = (first_name or '').strip()
        last_name = (last_name or '').strip()
        if not first_name or not last_name:
            raise ValidationError("First and last name are required")

        generation = self._session.generation
        data = await self._api.update_profile(first_name, last_name)
        self._ensure_current(generation, 'Profile update')

        return self._cache.apply_profile(data)

    async def upload_avatar(self, file_path: Union[str, Path]) -> Profile:
        """
        Upload a new profile image.

        Args:
            file_path: JPEG or PNG file no larger than ``max_avatar_bytes``

        Returns:
            Updated profile (already written to the cache)

        Raises:
            FileNotFoundError: File missing
            ValidationError: Not a file, empty, too large or wrong type
            GatewayError: Request failed
        """
        path, size = self._validator.validate(file_path)
        self._validator.validate_size(size, self._config.max_avatar_bytes)
        self._validator.validate_extension(path, self.AVATAR_EXTENSIONS)

        content = await self._reader.read_file(path)

        generation = self._session.generation
        data = await self._api.upload_profile_image(path.name, content)
        self._ensure_current(generation, 'Avatar upload')

        profile = self._cache.apply_profile(data)
        self._logger.info(f"Uploaded avatar {path.name} ({size} bytes)")
        return profile
