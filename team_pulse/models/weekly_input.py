from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class WeeklyInput(BaseModel):
    """One member's free-text update tagged to a week."""

    model_config = ConfigDict(frozen=True)  # Append-only records

    id: str
    team_id: str
    member_name: str
    update: str
    week_key: str
    created_at: Optional[datetime] = None
