"""Shared fakes for the workflow tests."""

from typing import Dict, List, Optional, Tuple

import pytest

from team_pulse.models.enums import Collection
from team_pulse.models.summary import Summary
from team_pulse.models.team import Team
from team_pulse.models.weekly_input import WeeklyInput
from team_pulse.storage.subscription import Subscription
from team_pulse.workflow.controller import WorkflowController
from team_pulse.workflow.state import WorkflowState


class FakeGateway:
    """In-memory stand-in for RemoteDataGateway. Writes push fresh snapshots
    to matching subscriptions, newest first."""

    def __init__(self):
        self.teams: Dict[str, Team] = {}
        self.inputs: List[WeeklyInput] = []
        self.summaries: List[Summary] = []
        self.writes: List[Tuple[str, dict]] = []
        self.subscriptions: List[Subscription] = []
        self._next_id = 0

    def _id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    async def create_team(self, name: str) -> Team:
        team = Team(id=self._id("team"), name=name)
        self.teams[team.id] = team
        self.writes.append(("teams", {"name": name}))
        return team

    async def get_team(self, team_id: str) -> Optional[Team]:
        return self.teams.get(team_id)

    async def add_weekly_input(self, team_id, member_name, update, week_key):
        record = WeeklyInput(
            id=self._id("input"),
            team_id=team_id,
            member_name=member_name,
            update=update,
            week_key=week_key,
        )
        self.inputs.insert(0, record)
        self.writes.append(("weekly_inputs", record.model_dump()))
        await self._notify(team_id, Collection.WEEKLY_INPUTS)
        return record

    async def add_summary(self, team_id, week_key, content):
        record = Summary(
            id=self._id("summary"), team_id=team_id, week_key=week_key, content=content
        )
        self.summaries.insert(0, record)
        self.writes.append(("summaries", record.model_dump()))
        await self._notify(team_id, Collection.SUMMARIES)
        return record

    async def fetch_snapshot(self, team_id, collection):
        rows = self.inputs if collection == Collection.WEEKLY_INPUTS else self.summaries
        return [row for row in rows if row.team_id == team_id]

    async def subscribe(self, team_id, collection, on_change):
        subscription = Subscription(
            team_id,
            collection,
            on_change,
            loader=lambda: self.fetch_snapshot(team_id, collection),
        )
        self.subscriptions.append(subscription)
        await subscription.refresh()
        return subscription

    async def _notify(self, team_id, collection):
        for subscription in self.subscriptions:
            if subscription.team_id == team_id and subscription.collection == collection:
                await subscription.refresh()

    def active_subscriptions(self) -> List[Subscription]:
        return [s for s in self.subscriptions if s.active]


class FakeSummarizer:
    def __init__(self, reply: str = "Wins: shipped", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []
        self.loading_seen: Optional[bool] = None
        self.controller: Optional[WorkflowController] = None

    async def invoke_summary_model(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.controller is not None:
            self.loading_seen = self.controller.state.loading_ai
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def controller(gateway, summarizer) -> WorkflowController:
    ctrl = WorkflowController(gateway, summarizer, state=WorkflowState(week_key="2026-W09"))
    summarizer.controller = ctrl
    return ctrl
