"""Tests for the Supabase connection and anonymous session service."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from team_pulse.config.settings import AppSettings
from team_pulse.errors import ConfigurationError, StoreUnavailable
from team_pulse.storage.supabase_client import SupabaseService

CREATE_CLIENT = "team_pulse.storage.supabase_client.create_async_client"


def make_settings(**overrides):
    values = {
        "supabase_url": "https://demo.supabase.co",
        "supabase_key": "anon-key-1234567890",
        "gemini_api_key": None,
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


def make_client(session=None):
    client = MagicMock()
    client.auth.get_session = AsyncMock(return_value=session)
    client.auth.sign_in_anonymously = AsyncMock()
    client.remove_all_channels = AsyncMock()
    return client


class TestInit:
    @pytest.mark.asyncio
    async def test_reuses_existing_session(self):
        client = make_client(session=MagicMock())
        with patch(CREATE_CLIENT, AsyncMock(return_value=client)) as create:
            assert await SupabaseService(make_settings()).init() is client
        create.assert_awaited_once_with("https://demo.supabase.co", "anon-key-1234567890")
        client.auth.sign_in_anonymously.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signs_in_anonymously_without_session(self):
        client = make_client(session=None)
        with patch(CREATE_CLIENT, AsyncMock(return_value=client)):
            await SupabaseService(make_settings()).init()
        client.auth.sign_in_anonymously.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sign_in_failure_is_not_retried(self):
        client = make_client(session=None)
        client.auth.sign_in_anonymously = AsyncMock(side_effect=RuntimeError("disabled"))
        with patch(CREATE_CLIENT, AsyncMock(return_value=client)):
            with pytest.raises(StoreUnavailable, match="Anonymous sign-in failed") as excinfo:
                await SupabaseService(make_settings()).init()
        assert isinstance(excinfo.value, ConfigurationError)
        client.auth.sign_in_anonymously.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_settings_create_no_client(self):
        with patch(CREATE_CLIENT, AsyncMock()) as create:
            with pytest.raises(ConfigurationError) as excinfo:
                await SupabaseService(make_settings(supabase_key=None)).init()
        assert str(excinfo.value) == "Missing Supabase environment variables: SUPABASE_KEY."
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_failure_raises_store_unavailable(self):
        with patch(CREATE_CLIENT, AsyncMock(side_effect=RuntimeError("bad url"))):
            with pytest.raises(StoreUnavailable, match="bad url"):
                await SupabaseService(make_settings()).init()

    @pytest.mark.asyncio
    async def test_second_init_returns_same_client(self):
        client = make_client(session=MagicMock())
        with patch(CREATE_CLIENT, AsyncMock(return_value=client)) as create:
            service = SupabaseService(make_settings())
            first = await service.init()
            second = await service.init()
        assert first is second is client
        create.assert_awaited_once()

    def test_client_before_init_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            SupabaseService(make_settings()).client


class TestShutdown:
    @pytest.mark.asyncio
    async def test_removes_all_channels(self):
        client = make_client(session=MagicMock())
        with patch(CREATE_CLIENT, AsyncMock(return_value=client)):
            service = SupabaseService(make_settings())
            await service.init()
        await service.shutdown()
        client.remove_all_channels.assert_awaited_once()
        with pytest.raises(ConfigurationError):
            service.client

    @pytest.mark.asyncio
    async def test_tolerates_channel_errors(self):
        client = make_client(session=MagicMock())
        client.remove_all_channels = AsyncMock(side_effect=RuntimeError("socket gone"))
        with patch(CREATE_CLIENT, AsyncMock(return_value=client)):
            service = SupabaseService(make_settings())
            await service.init()
        await service.shutdown()
        client.remove_all_channels.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_without_init_is_a_no_op(self):
        await SupabaseService(make_settings()).shutdown()
