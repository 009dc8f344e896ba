"""Tests for the resource cache."""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from simspy.core.api import NetworkError
from simspy.core.exceptions import StaleResponseError
from simspy.core.resources import Balance, Profile, ResourceCache


def gated(payload):
    """Coroutine function that returns ``payload`` once its event is set."""
    gate = asyncio.Event()

    async def fetch():
        await gate.wait()
        return payload

    return gate, fetch


class TestResourceCache:
    """Test suite for ResourceCache."""

    @pytest.fixture
    def mock_api(self, sample_profile_data, sample_services_data, sample_banners_data):
        api = AsyncMock()
        api.get_profile = AsyncMock(return_value=sample_profile_data)
        api.get_balance = AsyncMock(return_value={'balance': 50000})
        api.get_services = AsyncMock(return_value=sample_services_data)
        api.get_banners = AsyncMock(return_value=sample_banners_data)
        return api

    @pytest.fixture
    def cache(self, mock_api, session):
        session.login('abc')
        return ResourceCache(mock_api, session)

    def test_nothing_loaded_initially(self, cache):
        assert cache.get_profile() is None
        assert cache.get_balance() is None
        assert cache.get_services() is None
        assert cache.get_banners() is None

    @pytest.mark.asyncio
    async def test_refresh_populates(self, cache):
        balance = await cache.refresh_balance()

        assert balance == Balance(50000)
        assert cache.get_balance() == Balance(50000)

    @pytest.mark.asyncio
    async def test_refresh_always_hits_network(self, cache, mock_api):
        await cache.refresh_balance()
        await cache.refresh_balance()

        assert mock_api.get_balance.await_count == 2

    @pytest.mark.asyncio
    async def test_catalog_refresh(self, cache):
        services = await cache.refresh_services()
        banners = await cache.refresh_banners()

        assert [s.code for s in services] == ['PAJAK', 'PLN']
        assert banners[0].name == 'Banner 1'
        assert cache.find_service('PLN').tariff == 10000
        assert cache.find_service('MISSING') is None

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_stale_value(self, cache, mock_api):
        await cache.refresh_balance()
        mock_api.get_balance.side_effect = NetworkError('offline')

        with pytest.raises(NetworkError):
            await cache.refresh_balance()

        assert cache.get_balance() == Balance(50000)

    @pytest.mark.asyncio
    async def test_refresh_all_collects_errors(self, cache, mock_api):
        mock_api.get_banners.side_effect = NetworkError('offline')

        errors = await cache.refresh_all()

        assert list(errors) == ['banners']
        assert cache.get_profile() is not None
        assert cache.get_balance() is not None
        assert cache.get_services() is not None
        assert cache.get_banners() is None

    @pytest.mark.asyncio
    async def test_logout_clears_everything(self, cache, session):
        await cache.refresh_all()

        session.logout()

        assert cache.get_profile() is None
        assert cache.get_balance() is None
        assert cache.get_services() is None
        assert cache.get_banners() is None

    def test_apply_balance_replaces(self, cache):
        cache.apply_balance(10000)
        cache.apply_balance(Balance(2500))

        assert cache.get_balance() == Balance(2500)

    def test_apply_profile_from_wire(self, cache, sample_profile_data):
        profile = cache.apply_profile(sample_profile_data)

        assert isinstance(profile, Profile)
        assert cache.get_profile() is profile

    def test_changed_event(self, cache):
        handler = Mock()
        cache.on('changed', handler)

        cache.apply_balance(100)

        handler.assert_called_once_with('balance', Balance(100))

    @pytest.mark.asyncio
    async def test_concurrent_refresh_second_issued_wins(self, cache, mock_api, sample_profile_data):
        """First-issued returns 'A' last, second-issued returns 'B' first: 'B' is kept."""
        gate_a, fetch_a = gated({**sample_profile_data, 'first_name': 'A'})
        gate_b, fetch_b = gated({**sample_profile_data, 'first_name': 'B'})
        mock_api.get_profile = Mock(side_effect=[fetch_a(), fetch_b()])

        first = asyncio.create_task(cache.refresh_profile())
        await asyncio.sleep(0)
        second = asyncio.create_task(cache.refresh_profile())
        await asyncio.sleep(0)

        gate_b.set()
        assert (await second).first_name == 'B'

        gate_a.set()
        assert (await first).first_name == 'B'

        assert cache.get_profile().first_name == 'B'

    @pytest.mark.asyncio
    async def test_write_through_beats_older_refresh(self, cache, mock_api):
        gate, fetch = gated({'balance': 50000})
        mock_api.get_balance = Mock(side_effect=[fetch()])

        refresh = asyncio.create_task(cache.refresh_balance())
        await asyncio.sleep(0)
        cache.apply_balance(40000)
        gate.set()
        await refresh

        assert cache.get_balance() == Balance(40000)

    @pytest.mark.asyncio
    async def test_response_after_logout_is_discarded(self, cache, mock_api, session):
        gate, fetch = gated({'balance': 50000})
        mock_api.get_balance = Mock(side_effect=[fetch()])

        refresh = asyncio.create_task(cache.refresh_balance())
        await asyncio.sleep(0)
        session.logout()
        gate.set()

        with pytest.raises(StaleResponseError):
            await refresh

        assert cache.get_balance() is None

    @pytest.mark.asyncio
    async def test_response_after_relogin_is_discarded(self, cache, mock_api, session):
        gate, fetch = gated({'balance': 50000})
        mock_api.get_balance = Mock(side_effect=[fetch()])

        refresh = asyncio.create_task(cache.refresh_balance())
        await asyncio.sleep(0)
        session.logout()
        session.login('other-user')
        gate.set()

        with pytest.raises(StaleResponseError):
            await refresh

        assert cache.get_balance() is None
