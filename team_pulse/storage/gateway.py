# team_pulse/storage/gateway.py
from typing import Any, Callable, Dict, List, Optional, Type, Union

import httpx
from loguru import logger
from postgrest import APIResponse
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import AsyncClient

from team_pulse.errors import StoreError, StoreUnavailable
from team_pulse.models.enums import ChangeEvent, Collection
from team_pulse.models.summary import Summary
from team_pulse.models.team import Team
from team_pulse.models.weekly_input import WeeklyInput
from team_pulse.storage.subscription import Subscription

TEAMS_TABLE = "teams"

RECORD_MODELS: Dict[Collection, Type[BaseModel]] = {
    Collection.WEEKLY_INPUTS: WeeklyInput,
    Collection.SUMMARIES: Summary,
}

Record = Union[WeeklyInput, Summary]


class RemoteDataGateway:
    """Reads, writes and live queries against the Supabase tables.

    ``created_at`` is never sent; the column default assigns it server-side.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def _execute(self, query: Any, action: str) -> APIResponse:
        try:
            return await query.execute()
        except APIError as e:
            logger.error(f"Supabase API error during {action}: {e.message}")
            logger.debug(f"Full APIError details: {e}")
            raise StoreError(f"Could not {action}: {e.message}") from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase unreachable during {action}: {e}")
            raise StoreUnavailable(f"Could not {action}: store unreachable ({e})") from e

    async def _insert(self, table: str, row: Dict[str, Any], action: str) -> Dict[str, Any]:
        response = await self._execute(self.client.table(table).insert(row), action)
        if not response.data:
            raise StoreError(f"Could not {action}: store returned no record.")
        return response.data[0]

    async def create_team(self, name: str) -> Team:
        record = await self._insert(TEAMS_TABLE, {"name": name}, "create team")
        team = Team.model_validate(record)
        logger.success(f"Created team '{team.name}' ({team.id}).")
        return team

    async def get_team(self, team_id: str) -> Optional[Team]:
        response = await self._execute(
            self.client.table(TEAMS_TABLE).select("*").eq("id", team_id).limit(1),
            "load team",
        )
        if not response.data:
            logger.info(f"No team found with id {team_id}.")
            return None
        return Team.model_validate(response.data[0])

    async def add_weekly_input(
        self, team_id: str, member_name: str, update: str, week_key: str
    ) -> WeeklyInput:
        record = await self._insert(
            Collection.WEEKLY_INPUTS.value,
            {
                "team_id": team_id,
                "member_name": member_name,
                "update": update,
                "week_key": week_key,
            },
            "save weekly input",
        )
        logger.success(f"Saved weekly input from {member_name} for {week_key}.")
        return WeeklyInput.model_validate(record)

    async def add_summary(self, team_id: str, week_key: str, content: str) -> Summary:
        record = await self._insert(
            Collection.SUMMARIES.value,
            {"team_id": team_id, "week_key": week_key, "content": content},
            "save summary",
        )
        logger.success(f"Saved summary for {week_key}.")
        return Summary.model_validate(record)

    async def fetch_snapshot(self, team_id: str, collection: Collection) -> List[Record]:
        """Full current list for a team, newest first."""
        response = await self._execute(
            self.client.table(collection.value)
            .select("*")
            .eq("team_id", team_id)
            .order("created_at", desc=True),
            f"load {collection.value}",
        )
        model = RECORD_MODELS[collection]
        return [model.model_validate(row) for row in response.data or []]

    async def subscribe(
        self,
        team_id: str,
        collection: Collection,
        on_change: Callable[[List[Record]], None],
    ) -> Subscription:
        """Opens a live query; ``on_change`` gets the initial list and every
        later list until the returned handle is unsubscribed."""
        subscription = Subscription(
            team_id,
            collection,
            on_change,
            loader=lambda: self.fetch_snapshot(team_id, collection),
        )

        def handle_change(payload: Dict[str, Any]) -> None:
            logger.debug(
                f"Realtime change on {collection.value} for team {team_id}: {payload.get('eventType', payload.get('type', '?'))}"
            )
            subscription.schedule_refresh()

        # Listen before the first read so no change falls between the two
        channel = self.client.channel(f"team-{team_id}-{collection.value}")
        channel.on_postgres_changes(
            event=ChangeEvent.ALL.value,
            schema="public",
            table=collection.value,
            filter=f"team_id=eq.{team_id}",
            callback=handle_change,
        )

        async def close_channel() -> None:
            await self.client.remove_channel(channel)

        subscription.attach_closer(close_channel)

        try:
            await channel.subscribe()
        except Exception as e:
            logger.error(f"Could not subscribe to {collection.value} for team {team_id}: {e}")
            await subscription.unsubscribe()
            raise StoreUnavailable(
                f"Could not subscribe to {collection.value}: {e}"
            ) from e
        logger.info(f"Subscribed to {collection.value} for team {team_id}.")

        try:
            await subscription.refresh()
        except Exception:
            await subscription.unsubscribe()
            raise
        return subscription
