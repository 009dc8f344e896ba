"""Pytest fixtures for simspy tests."""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from simspy.core.api import APIConfig, AsyncAPIClient
from simspy.core.session import MemoryCredentialStore, SessionManager


@pytest.fixture
def config():
    """Default configuration pointing at a dummy host."""
    return APIConfig(base_url='https://api.test')


@pytest.fixture
def session():
    """Anonymous session backed by memory storage."""
    return SessionManager(MemoryCredentialStore())


@pytest.fixture
def sample_profile_data():
    """Profile as returned by GET /profile."""
    return {
        'email': 'user@nutech.test',
        'first_name': 'User',
        'last_name': 'Nutech',
        'profile_image': 'https://api.test/images/user.jpeg',
    }


@pytest.fixture
def sample_services_data():
    """Service catalog as returned by GET /services."""
    return [
        {
            'service_code': 'PAJAK',
            'service_name': 'Pajak PBB',
            'service_icon': 'https://api.test/icons/pajak.png',
            'service_tariff': 40000,
        },
        {
            'service_code': 'PLN',
            'service_name': 'Listrik',
            'service_icon': 'https://api.test/icons/listrik.png',
            'service_tariff': 10000,
        },
    ]


@pytest.fixture
def sample_banners_data():
    """Banners as returned by GET /banner."""
    return [
        {
            'banner_name': 'Banner 1',
            'banner_image': 'https://api.test/banners/1.png',
            'description': 'Lerem Ipsum Dolor sit amet',
        },
    ]


@pytest.fixture
def make_record():
    """Factory for history records in wire format."""
    def factory(index: int, transaction_type: str = 'PAYMENT') -> dict:
        return {
            'invoice_number': f'INV17082023-{index:03d}',
            'transaction_type': transaction_type,
            'description': f'Transaction {index}',
            'total_amount': 10000 + index,
            'created_on': '2023-08-17T10:10:10.000Z',
        }
    return factory


@pytest.fixture
def make_response():
    """Factory for a mocked ``async with session.request(...)`` context."""
    def factory(status: int, body) -> MagicMock:
        response = MagicMock()
        response.status = status
        text = body if isinstance(body, str) else json.dumps(body)
        response.text = AsyncMock(return_value=text)

        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=None)
        return context
    return factory


@pytest.fixture
def mock_http(make_response):
    """
    Mocked aiohttp session.

    Queue responses with ``mock_http.queue(status, body)``; each
    ``request()`` call consumes the next one.
    """
    http = MagicMock()
    http.closed = False
    responses = []

    def queue(status: int, body) -> None:
        responses.append(make_response(status, body))

    def request(method, url, **kwargs):
        return responses.pop(0)

    http.queue = queue
    http.request = MagicMock(side_effect=request)
    return http


@pytest.fixture
def api(session, config, mock_http):
    """Gateway wired to the mocked HTTP session."""
    client = AsyncAPIClient(session, config)
    client._ensure_session = AsyncMock(return_value=mock_http)
    return client


def envelope(data=None, status: int = 0, message: str = 'Sukses') -> dict:
    """Response envelope used by the remote service."""
    return {'status': status, 'message': message, 'data': data}


@pytest.fixture
def ok():
    """Factory for success envelopes."""
    return lambda data=None: envelope(data)


@pytest.fixture
def fail():
    """Factory for application-error envelopes."""
    return lambda status, message: envelope(None, status, message)
