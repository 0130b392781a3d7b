"""Tests for the OpenWeather client with mocked httpx."""

from unittest.mock import patch

import httpx
import pytest
import respx

from coldfront.ingest.openweather_client import OpenWeatherClient

FORECAST_URL = "https://test-ow.example.com/data/2.5/forecast"


@pytest.fixture
def client() -> OpenWeatherClient:
    return OpenWeatherClient(api_key="test-key", base_url="https://test-ow.example.com")


@pytest.fixture
def retrying_client() -> OpenWeatherClient:
    return OpenWeatherClient(
        api_key="test-key",
        base_url="https://test-ow.example.com",
        max_retries=1,
        retry_base_delay=0.01,
    )


@pytest.fixture
def payload(full_days, forecast_payload) -> dict:
    return forecast_payload(full_days([40, 28]))


class TestGetForecast:
    @respx.mock
    def test_success(self, client: OpenWeatherClient, payload: dict):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=payload))

        result = client.get_forecast(40.0, -105.0)
        assert len(result["list"]) == 16
        assert result["city"]["name"] == "Testville"

    @respx.mock
    def test_query_params(self, client: OpenWeatherClient, payload: dict):
        route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=payload)
        )

        client.get_forecast(40.5, -105.25)
        params = route.calls[0].request.url.params
        assert params["lat"] == "40.5"
        assert params["lon"] == "-105.25"
        assert params["units"] == "imperial"
        assert params["appid"] == "test-key"

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key")
        assert OpenWeatherClient().api_key == "env-key"

    @respx.mock
    def test_503_is_not_retried_by_default(self, client: OpenWeatherClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(503))

        with patch("coldfront.ingest.openweather_client.time.sleep") as sleep, \
                pytest.raises(httpx.HTTPStatusError):
            client.get_forecast(40.0, -105.0)
        assert route.call_count == 1
        sleep.assert_not_called()

    @respx.mock
    def test_transport_error_is_not_retried_by_default(self, client: OpenWeatherClient):
        route = respx.get(FORECAST_URL).mock(side_effect=httpx.ConnectError("boom"))

        with pytest.raises(httpx.ConnectError):
            client.get_forecast(40.0, -105.0)
        assert route.call_count == 1


class TestOptInRetries:
    @respx.mock
    def test_retry_on_503(self, retrying_client: OpenWeatherClient, payload: dict):
        route = respx.get(FORECAST_URL).mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json=payload),
            ]
        )

        with patch("coldfront.ingest.openweather_client.time.sleep"):
            result = retrying_client.get_forecast(40.0, -105.0)
        assert "list" in result
        assert route.call_count == 2

    @respx.mock
    def test_retry_on_transport_error(self, retrying_client: OpenWeatherClient, payload: dict):
        route = respx.get(FORECAST_URL).mock(
            side_effect=[
                httpx.ConnectError("boom"),
                httpx.Response(200, json=payload),
            ]
        )

        with patch("coldfront.ingest.openweather_client.time.sleep"):
            retrying_client.get_forecast(40.0, -105.0)
        assert route.call_count == 2

    @respx.mock
    def test_exhausted_retries(self, retrying_client: OpenWeatherClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(503))

        with patch("coldfront.ingest.openweather_client.time.sleep"), pytest.raises(httpx.HTTPStatusError):
            retrying_client.get_forecast(40.0, -105.0)
        assert route.call_count == 2

    @respx.mock
    def test_server_error_not_retried(self, retrying_client: OpenWeatherClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(httpx.HTTPStatusError):
            retrying_client.get_forecast(40.0, -105.0)
        assert route.call_count == 1
