# team_pulse/workflow/controller.py
from typing import List, Optional

from loguru import logger

from team_pulse.errors import (
    ConfigurationError,
    PreconditionError,
    TeamPulseError,
    ValidationError,
)
from team_pulse.models.enums import Collection
from team_pulse.models.summary import Summary
from team_pulse.models.team import Team
from team_pulse.models.weekly_input import WeeklyInput
from team_pulse.storage.gateway import RemoteDataGateway
from team_pulse.storage.subscription import Subscription
from team_pulse.summary.gemini_client import GeminiClient
from team_pulse.summary.prompt_builder import build_prompt
from team_pulse.utils.misc_utils import clean_text
from team_pulse.workflow.state import WorkflowState


class WorkflowController:
    """Drives the create-team / add-update / generate-summary workflow.

    Every public operation clears the error slot, reports failures by writing
    one message into ``state.error`` and returns ``False``; none of them raise.
    ``gateway`` is ``None`` when the store is not configured, in which case
    ``config_error`` explains why.
    """

    def __init__(
        self,
        gateway: Optional[RemoteDataGateway],
        summarizer: GeminiClient,
        config_error: str = "",
        state: Optional[WorkflowState] = None,
    ):
        self.gateway = gateway
        self.summarizer = summarizer
        self.config_error = config_error
        self.state = state or WorkflowState()
        self._subscriptions: List[Subscription] = []

    # --- Lifecycle ---

    def start(self) -> bool:
        """Surfaces a bootstrap configuration problem, if any."""
        if self.config_error:
            self.state.error = self.config_error
            return False
        return True

    async def shutdown(self) -> None:
        await self._detach()
        logger.info("Workflow shut down.")

    # --- Helpers ---

    def _require_gateway(self) -> RemoteDataGateway:
        if self.gateway is None:
            raise ConfigurationError(self.config_error or "Supabase is not configured.")
        return self.gateway

    def _require_team(self) -> Team:
        if self.state.active_team is None:
            raise PreconditionError("Create a team first.")
        return self.state.active_team

    def _fail(self, operation: str, error: Exception) -> bool:
        if isinstance(error, TeamPulseError):
            logger.warning(f"{operation} failed: {error}")
        else:
            logger.exception(f"Unexpected error during {operation}: {error}")
        self.state.error = str(error) or error.__class__.__name__
        return False

    def _on_entries(self, rows: List[WeeklyInput]) -> None:
        self.state.entries = list(rows)

    def _on_summaries(self, rows: List[Summary]) -> None:
        self.state.summaries = list(rows)

    async def _detach(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            try:
                await subscription.unsubscribe()
            except Exception as e:
                logger.warning(
                    f"Error closing {subscription.collection.value} subscription: {e}"
                )

    async def _activate(self, team: Team) -> None:
        gateway = self._require_gateway()
        # Old listeners go first so nothing from the previous team lands here
        await self._detach()
        self.state.active_team = team
        self.state.entries = []
        self.state.summaries = []

        self._subscriptions.append(
            await gateway.subscribe(team.id, Collection.WEEKLY_INPUTS, self._on_entries)
        )
        self._subscriptions.append(
            await gateway.subscribe(team.id, Collection.SUMMARIES, self._on_summaries)
        )
        logger.info(f"Active team is now '{team.name}' ({team.id}).")

    # --- Operations ---

    async def select_team(self, team: Team) -> bool:
        self.state.error = ""
        try:
            await self._activate(team)
            return True
        except Exception as e:
            return self._fail("select team", e)

    async def open_team(self, team_id: str) -> bool:
        """Loads an existing team by id and makes it active."""
        self.state.error = ""
        try:
            team_id = clean_text(team_id)
            if not team_id:
                raise ValidationError("Team id is required.")
            team = await self._require_gateway().get_team(team_id)
            if team is None:
                raise PreconditionError(f"No team found with id {team_id}.")
            await self._activate(team)
            return True
        except Exception as e:
            return self._fail("open team", e)

    def set_week_key(self, value: str) -> None:
        # No format check, filtering matches the literal string
        self.state.week_key = value

    async def create_team(self) -> bool:
        self.state.error = ""
        try:
            name = clean_text(self.state.team_name)
            if not name:
                raise ValidationError("Team name is required.")
            gateway = self._require_gateway()

            team = await gateway.create_team(name)
            # Cleared once the row exists, even if activation fails below
            self.state.team_name = ""
            await self._activate(team)
            return True
        except Exception as e:
            return self._fail("create team", e)

    async def add_weekly_input(self) -> bool:
        self.state.error = ""
        try:
            team = self._require_team()
            gateway = self._require_gateway()
            member_name = clean_text(self.state.member_name)
            update = clean_text(self.state.update)
            if not member_name or not update:
                raise ValidationError("Member name and update are required.")

            await gateway.add_weekly_input(
                team.id, member_name, update, self.state.week_key
            )
            # Member name and week stay filled for the next entry
            self.state.update = ""
            return True
        except Exception as e:
            return self._fail("add weekly input", e)

    async def generate_summary(self) -> bool:
        self.state.error = ""
        try:
            team = self._require_team()
            gateway = self._require_gateway()
            week_key = self.state.week_key
            week_entries = self.state.week_entries
            if not week_entries:
                raise PreconditionError(
                    "Add at least one weekly update before generating summary."
                )
        except Exception as e:
            return self._fail("generate summary", e)

        self.state.loading_ai = True
        try:
            logger.info(
                f"Generating summary for '{team.name}' {week_key} from {len(week_entries)} updates."
            )
            prompt = build_prompt(team.name, week_key, week_entries)
            content = await self.summarizer.invoke_summary_model(prompt)
            await gateway.add_summary(team.id, week_key, content)
            return True
        except Exception as e:
            return self._fail("generate summary", e)
        finally:
            self.state.loading_ai = False
