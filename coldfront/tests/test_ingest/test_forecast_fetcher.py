"""Tests for the forecast fetcher and payload parsing."""

from unittest.mock import MagicMock

import httpx
import pytest

from coldfront.config.schema import LocationConfig
from coldfront.ingest.forecast_fetcher import ForecastFetcher, parse_forecast
from coldfront.ingest.openweather_client import OpenWeatherClient
from coldfront.models.errors import ErrorKind, RetrievalFailure


def _http_error(status: int, body: str = "oops") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://test-ow.example.com/data/2.5/forecast")
    response = httpx.Response(status, text=body, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestForecastFetcher:
    def test_fetch_success(self, full_days, forecast_payload):
        mock_client = MagicMock(spec=OpenWeatherClient)
        mock_client.get_forecast.return_value = forecast_payload(full_days([40, 28]))

        result = ForecastFetcher(mock_client).fetch(LocationConfig(lat=1.5, lon=2.5))

        assert result.ok
        assert result.error is None
        assert result.forecast.city_name == "Testville"
        assert len(result.forecast.samples) == 16
        mock_client.get_forecast.assert_called_once_with(1.5, 2.5)

    def test_http_error_is_a_result(self, caplog):
        mock_client = MagicMock(spec=OpenWeatherClient)
        mock_client.get_forecast.side_effect = _http_error(500, "server down")

        result = ForecastFetcher(mock_client).fetch(LocationConfig())

        assert not result.ok
        assert result.forecast is None
        assert result.error.kind == ErrorKind.RETRIEVAL_FAILURE
        assert result.error.status_code == 500
        assert "server down" in result.error.message
        assert "Error getting forecast" in caplog.text

    def test_transport_error_is_a_result(self):
        mock_client = MagicMock(spec=OpenWeatherClient)
        mock_client.get_forecast.side_effect = httpx.ConnectError("no route")

        result = ForecastFetcher(mock_client).fetch(LocationConfig())
        assert not result.ok
        assert result.error.status_code is None

    def test_bad_json_is_a_result(self):
        mock_client = MagicMock(spec=OpenWeatherClient)
        mock_client.get_forecast.side_effect = ValueError("Expecting value")

        result = ForecastFetcher(mock_client).fetch(LocationConfig())
        assert not result.ok

    def test_malformed_payload_is_a_result(self):
        mock_client = MagicMock(spec=OpenWeatherClient)
        mock_client.get_forecast.return_value = {"cod": "200", "list": [{"dt": 1}]}

        result = ForecastFetcher(mock_client).fetch(LocationConfig())
        assert not result.ok
        assert "index 0" in result.error.message


class TestParseForecast:
    def test_extracts_samples(self, day_samples, forecast_payload):
        samples = day_samples(0, [(31.2, 40.1), (30.0, 38.5)])
        forecast = parse_forecast(forecast_payload(samples, city="Fargo"))
        assert forecast.city_name == "Fargo"
        assert forecast.samples == samples

    def test_empty_list(self):
        forecast = parse_forecast({"list": [], "city": {"name": "Nowhere"}})
        assert forecast.samples == []

    def test_missing_city_is_fine(self):
        assert parse_forecast({"list": []}).city_name == ""

    @pytest.mark.parametrize("raw", [None, [], {"cod": "200"}, {"list": "nope"}])
    def test_bad_shape(self, raw):
        with pytest.raises(RetrievalFailure):
            parse_forecast(raw)
