# team_pulse/storage/subscription.py
import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Set

from loguru import logger

from team_pulse.models.enums import Collection

SnapshotCallback = Callable[[List[Any]], None]
SnapshotLoader = Callable[[], Awaitable[List[Any]]]
ChannelCloser = Callable[[], Awaitable[None]]


class Subscription:
    """Handle for one live, team-scoped query.

    Every delivery is the full current list, ordered by ``created_at``
    descending. Once :meth:`unsubscribe` has been called no further snapshot
    reaches the callback, including refreshes that were already in flight.
    """

    def __init__(
        self,
        team_id: str,
        collection: Collection,
        on_change: SnapshotCallback,
        loader: SnapshotLoader,
    ):
        self.team_id = team_id
        self.collection = collection
        self._on_change = on_change
        self._loader = loader
        self._closer: Optional[ChannelCloser] = None
        self._pending: Set[asyncio.Task] = set()
        self._active = True
        # Reads are numbered when started; a read older than the last
        # delivered one is discarded
        self._issued = 0
        self._delivered = 0

    @property
    def active(self) -> bool:
        return self._active

    def attach_closer(self, closer: ChannelCloser) -> None:
        self._closer = closer

    async def refresh(self) -> None:
        """Reloads the snapshot and hands it to the callback if still active."""
        if not self._active:
            return
        self._issued += 1
        sequence = self._issued
        rows = await self._loader()
        if sequence < self._delivered:
            logger.debug(
                f"Dropping stale snapshot {sequence} for {self.collection.value} (team {self.team_id})"
            )
            return
        self._delivered = sequence
        self.deliver(rows)

    def deliver(self, rows: List[Any]) -> None:
        if not self._active:
            logger.debug(
                f"Dropping snapshot for closed subscription {self.collection.value} (team {self.team_id})"
            )
            return
        self._on_change(rows)

    def schedule_refresh(self) -> None:
        """Queues a refresh on the running loop. Used from push callbacks."""
        if not self._active:
            return
        task = asyncio.get_running_loop().create_task(self._safe_refresh())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _safe_refresh(self) -> None:
        try:
            await self.refresh()
        except Exception as e:
            # Push-triggered refreshes have no caller to report to
            logger.error(
                f"Failed to refresh {self.collection.value} for team {self.team_id}: {e}"
            )

    async def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
        if self._closer:
            await self._closer()
        logger.debug(
            f"Unsubscribed from {self.collection.value} for team {self.team_id}"
        )
