import httpx
import pytest

from balloonwatch.ingestors.winds import WindIngestor, parse_wind_payload


def _payload():
    return {
        "latitude": 10.0,
        "longitude": 20.0,
        "hourly": {
            "time": ["2024-01-01T00:00", "2024-01-01T01:00", "2024-01-01T02:00"],
            "windspeed_700hPa": [10.0, 11.0, 12.5],
            "winddirection_700hPa": [200, 210, 220],
            "windspeed_500hPa": [30.0, 31.0, 32.0],
            "winddirection_500hPa": [250, 255, 260],
        },
    }


@pytest.mark.anyio
async def test_wind_ingestor_reads_last_hourly_entry():
    def handler(request: httpx.Request):
        params = request.url.params
        assert params["latitude"] == "10.0"
        assert params["longitude"] == "20.0"
        assert "windspeed_700hPa" in params["hourly"]
        assert params["timezone"] == "UTC"
        return httpx.Response(200, json=_payload())

    transport = httpx.MockTransport(handler)
    ingestor = WindIngestor(base_url="https://winds.test", transport=transport)

    sample = await ingestor.get_winds(10.0, 20.0)

    assert sample.wind700 == 12.5
    assert sample.dir700 == 220
    assert sample.wind500 == 32.0
    assert sample.dir500 == 260


@pytest.mark.anyio
async def test_wind_ingestor_handles_rate_limit():
    transport = httpx.MockTransport(lambda request: httpx.Response(429, text="rate limited"))
    ingestor = WindIngestor(base_url="https://winds.test", transport=transport)

    sample = await ingestor.get_winds(0.0, 0.0)

    assert sample.is_empty()


@pytest.mark.anyio
async def test_wind_ingestor_handles_error_response():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))
    ingestor = WindIngestor(base_url="https://winds.test", transport=transport)

    assert (await ingestor.get_winds(0.0, 0.0)).is_empty()


@pytest.mark.anyio
async def test_wind_ingestor_handles_timeout():
    def handler(request: httpx.Request):
        raise httpx.ConnectTimeout("timeout", request=request)

    ingestor = WindIngestor(base_url="https://winds.test", transport=httpx.MockTransport(handler))

    assert (await ingestor.get_winds(0.0, 0.0)).is_empty()


@pytest.mark.anyio
async def test_wind_ingestor_handles_invalid_json():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    ingestor = WindIngestor(base_url="https://winds.test", transport=transport)

    assert (await ingestor.get_winds(0.0, 0.0)).is_empty()


def test_parse_wind_payload_missing_series():
    payload = _payload()
    del payload["hourly"]["windspeed_500hPa"]
    payload["hourly"]["winddirection_500hPa"] = [250]

    sample = parse_wind_payload(payload)

    assert sample.wind700 == 12.5
    assert sample.wind500 is None
    assert sample.dir500 is None


def test_parse_wind_payload_empty_time_series():
    payload = _payload()
    payload["hourly"]["time"] = []

    assert parse_wind_payload(payload).is_empty()
    assert parse_wind_payload({}).is_empty()
    assert parse_wind_payload([1, 2]).is_empty()


def test_parse_wind_payload_ignores_unrepresentable_numbers():
    payload = _payload()
    payload["hourly"]["windspeed_700hPa"][-1] = 10**400
    payload["hourly"]["windspeed_500hPa"][-1] = "1e400"

    sample = parse_wind_payload(payload)

    assert sample.wind700 is None
    assert sample.wind500 is None
    assert sample.dir700 == 220
