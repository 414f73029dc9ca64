"""
Tests for application wiring and lifespan handling.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import create_app
from api.weather import WeatherGateway


def test_injected_collaborators_are_used(settings, book_store, weather_gateway):
    app = create_app(settings, book_store=book_store, weather_gateway=weather_gateway)

    with TestClient(app):
        assert app.state.book_store is book_store
        assert app.state.weather_gateway is weather_gateway

    # Injected collaborators stay open; their owner closes them
    assert not weather_gateway.client.is_closed


def test_owned_weather_gateway_is_built_and_closed(settings, book_store):
    app = create_app(settings, book_store=book_store)

    with TestClient(app):
        gateway = app.state.weather_gateway
        assert isinstance(gateway, WeatherGateway)
        assert gateway.api_key == "test-weather-key"
        assert gateway.api_url == settings.weather_api_url
        assert gateway.client.timeout.read == settings.request_timeout

    assert gateway.client.is_closed


def test_store_is_built_from_settings(settings):
    with patch("api.main.AsyncIOMotorClient") as client_cls:
        client = client_cls.return_value

        async def ping(*args, **kwargs):
            return {"ok": 1}

        client.admin.command = ping
        app = create_app(settings)

        with TestClient(app):
            store = app.state.book_store
            client_cls.assert_called_once_with(settings.mongo_uri)
            client.get_default_database.assert_called_once_with(default="bookstore")
            assert store.collection is client.get_default_database.return_value.__getitem__.return_value

        client.close.assert_called_once()
