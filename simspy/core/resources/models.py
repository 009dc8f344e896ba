"""
Resource data models.

Immutable snapshots of server-derived data. Each model knows how to read
itself from the wire representation used by the remote service.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Profile:
    """
    User profile.

    Attributes:
        email: Account email
        first_name: Given name
        last_name: Family name
        profile_image: Avatar URL, if the user uploaded one
    """
    email: str
    first_name: str
    last_name: str
    profile_image: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Profile':
        return cls(
            email=data.get('email', ''),
            first_name=data.get('first_name', ''),
            last_name=data.get('last_name', ''),
            profile_image=data.get('profile_image') or None,
        )


@dataclass(frozen=True)
class Balance:
    """Account balance in minor units."""
    amount: int

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Balance cannot be negative: {self.amount}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Balance':
        return cls(amount=int(data['balance']))


@dataclass(frozen=True)
class Service:
    """Payable service from the catalog."""
    code: str
    name: str
    tariff: int
    icon_url: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Service':
        return cls(
            code=data['service_code'],
            name=data.get('service_name', ''),
            tariff=int(data.get('service_tariff', 0)),
            icon_url=data.get('service_icon', ''),
        )


@dataclass(frozen=True)
class Banner:
    """Promotional banner."""
    name: str
    image_url: str
    description: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Banner':
        return cls(
            name=data.get('banner_name', ''),
            image_url=data.get('banner_image', ''),
            description=data.get('description', ''),
        )


class TransactionType(Enum):
    """Kind of history entry."""
    TOPUP = 'TOPUP'
    PAYMENT = 'PAYMENT'


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class TransactionRecord:
    """
    One entry of the transaction history.

    Attributes:
        type: TOPUP or PAYMENT
        amount: Amount in minor units
        description: Server-provided description
        created_at: Creation time
        invoice_number: Invoice reference, when the server sends one
    """
    type: TransactionType
    amount: int
    description: str
    created_at: datetime
    invoice_number: Optional[str] = None

    @property
    def signed_amount(self) -> int:
        """Amount with the sign of its effect on the balance."""
        return self.amount if self.type is TransactionType.TOPUP else -self.amount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionRecord':
        return cls(
            type=TransactionType(data['transaction_type']),
            amount=int(data['total_amount']),
            description=data.get('description', ''),
            created_at=parse_timestamp(data['created_on']),
            invoice_number=data.get('invoice_number'),
        )
