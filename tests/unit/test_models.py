"""Tests for resource models."""
from datetime import datetime, timezone

import pytest

from simspy.core.resources import (
    Balance,
    Banner,
    Profile,
    Service,
    TransactionRecord,
    TransactionType,
)


class TestProfile:

    def test_from_dict(self, sample_profile_data):
        profile = Profile.from_dict(sample_profile_data)

        assert profile.email == 'user@nutech.test'
        assert profile.full_name == 'User Nutech'
        assert profile.profile_image.endswith('user.jpeg')

    def test_empty_image_is_none(self, sample_profile_data):
        sample_profile_data['profile_image'] = ''

        assert Profile.from_dict(sample_profile_data).profile_image is None


class TestBalance:

    def test_from_dict(self):
        assert Balance.from_dict({'balance': 150000}) == Balance(150000)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            Balance(-1)


class TestCatalog:

    def test_service_from_dict(self, sample_services_data):
        service = Service.from_dict(sample_services_data[0])

        assert service.code == 'PAJAK'
        assert service.tariff == 40000

    def test_banner_from_dict(self, sample_banners_data):
        banner = Banner.from_dict(sample_banners_data[0])

        assert banner.name == 'Banner 1'
        assert banner.image_url.endswith('1.png')


class TestTransactionRecord:

    def test_from_dict(self, make_record):
        record = TransactionRecord.from_dict(make_record(1, 'TOPUP'))

        assert record.type is TransactionType.TOPUP
        assert record.amount == 10001
        assert record.invoice_number == 'INV17082023-001'
        assert record.created_at == datetime(2023, 8, 17, 10, 10, 10, tzinfo=timezone.utc)

    def test_signed_amount(self, make_record):
        payment = TransactionRecord.from_dict(make_record(1, 'PAYMENT'))
        topup = TransactionRecord.from_dict(make_record(1, 'TOPUP'))

        assert payment.signed_amount == -10001
        assert topup.signed_amount == 10001

    def test_unknown_type_rejected(self, make_record):
        with pytest.raises(ValueError):
            TransactionRecord.from_dict(make_record(1, 'REFUND'))
