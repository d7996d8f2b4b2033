# team_pulse/workflow/state.py
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from team_pulse.models.summary import Summary
from team_pulse.models.team import Team
from team_pulse.models.weekly_input import WeeklyInput
from team_pulse.utils.week_utils import compute_week_key


def filter_by_week(entries: List[WeeklyInput], week_key: str) -> List[WeeklyInput]:
    """Entries whose week key matches exactly, in their original order."""
    return [entry for entry in entries if entry.week_key == week_key]


class WorkflowState(BaseModel):
    """Everything the session shows: form fields, cached records and the
    single error and loading slots."""

    team_name: str = ""
    active_team: Optional[Team] = None
    week_key: str = Field(default_factory=compute_week_key)
    member_name: str = ""
    update: str = ""

    entries: List[WeeklyInput] = []
    summaries: List[Summary] = []

    loading_ai: bool = False
    error: str = ""

    @computed_field  # type: ignore[misc]
    @property
    def week_entries(self) -> List[WeeklyInput]:
        return filter_by_week(self.entries, self.week_key)
