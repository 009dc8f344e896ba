"""Tests for request building and envelope decoding."""
import pytest

from simspy.core.api import APIConfig, ApplicationError, NetworkError
from simspy.core.api.request import RequestBuilder, ResponseHandler


class TestRequestBuilder:
    """Test suite for RequestBuilder."""

    @pytest.fixture
    def config(self):
        return APIConfig(base_url='https://api.test')

    def test_headers_with_token(self, config):
        builder = RequestBuilder(config, 'abc')

        assert builder.build_headers() == {'Authorization': 'Bearer abc'}

    def test_headers_without_token(self, config):
        assert RequestBuilder(config).build_headers() == {}

    def test_url_with_params(self, config):
        builder = RequestBuilder(config)

        url = builder.build_url('transaction/history', {'offset': 0, 'limit': 5})

        assert url == 'https://api.test/transaction/history?offset=0&limit=5'

    def test_json_payload(self, config):
        payload = RequestBuilder(config).build_payload({'service_code': 'PLN'})

        assert payload == {'json': {'service_code': 'PLN'}}

    def test_empty_payload(self, config):
        assert RequestBuilder(config).build_payload() == {}

    def test_files_take_precedence(self, config):
        payload = RequestBuilder(config).build_payload(
            {'ignored': True},
            files={'file': ('avatar.jpg', b'data')}
        )

        assert list(payload) == ['data']


class TestResponseHandler:
    """Test suite for ResponseHandler."""

    def test_success_returns_data(self):
        text = '{"status": 0, "message": "Sukses", "data": {"balance": 1}}'

        assert ResponseHandler.process_response(200, text) == {'balance': 1}

    def test_success_with_null_data(self):
        text = '{"status": 0, "message": "Registrasi berhasil", "data": null}'

        assert ResponseHandler.process_response(200, text) is None

    def test_application_error_keeps_message(self):
        text = '{"status": 102, "message": "Email sudah terdaftar", "data": null}'

        with pytest.raises(ApplicationError) as exc_info:
            ResponseHandler.process_response(400, text)

        assert exc_info.value.message == 'Email sudah terdaftar'
        assert exc_info.value.error_code == 102

    def test_application_error_default_message(self):
        text = '{"status": 108, "data": null}'

        with pytest.raises(ApplicationError) as exc_info:
            ResponseHandler.process_response(400, text)

        assert 'Token' in exc_info.value.message

    @pytest.mark.parametrize('text', ['', 'not json', '[]', '{"data": 1}', '{"status": "0"}'])
    def test_undecodable_bodies(self, text):
        with pytest.raises(NetworkError):
            ResponseHandler.process_response(200, text)

    def test_extract_message(self):
        assert ResponseHandler.extract_message('{"message": "nope"}') == 'nope'
        assert ResponseHandler.extract_message('<html>') is None
