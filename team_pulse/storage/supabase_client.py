# team_pulse/storage/supabase_client.py
from typing import Optional

from loguru import logger
from supabase import AsyncClient, create_async_client

from team_pulse.config.settings import AppSettings
from team_pulse.errors import ConfigurationError, StoreUnavailable


class SupabaseService:
    """Process-scoped Supabase connection plus the anonymous auth session.

    ``init()`` must complete before any store operation; ``shutdown()`` drops
    every realtime channel.
    """

    def __init__(self, app_settings: AppSettings):
        self._settings = app_settings
        self._client: Optional[AsyncClient] = None

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise ConfigurationError("Supabase is not configured.")
        return self._client

    async def init(self) -> AsyncClient:
        """Creates the async client and establishes an anonymous session."""
        if self._client:
            logger.debug("Async Supabase client already initialized.")
            return self._client

        config_error = self._settings.store_config_error
        if config_error:
            logger.critical(config_error)
            raise ConfigurationError(config_error)

        logger.debug(
            f"Attempting to initialize Async Supabase client with URL: {self._settings.supabase_url}"
        )
        try:
            client: AsyncClient = await create_async_client(
                self._settings.supabase_url, self._settings.supabase_key
            )
        except Exception as e:
            logger.exception(f"Failed to initialize Async Supabase client: {e}")
            raise StoreUnavailable(f"Could not connect to Supabase: {e}") from e

        self._client = client
        logger.success("Async Supabase client initialized successfully.")
        await self.ensure_anonymous_auth()
        return client

    async def ensure_anonymous_auth(self) -> None:
        """Reuses the current session or signs in anonymously. Not retried."""
        client = self.client
        try:
            session = await client.auth.get_session()
            if session:
                logger.debug("Reusing existing Supabase session.")
                return
            await client.auth.sign_in_anonymously()
            logger.success("Signed in to Supabase anonymously.")
        except Exception as e:
            logger.error(f"Anonymous sign-in failed: {e}")
            raise StoreUnavailable(f"Anonymous sign-in failed: {e}") from e

    async def shutdown(self) -> None:
        if not self._client:
            return
        client = self._client
        self._client = None
        try:
            await client.remove_all_channels()
        except Exception as e:
            logger.warning(f"Error during Supabase shutdown: {e}")
        logger.info("Supabase client shut down.")
