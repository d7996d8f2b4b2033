# team_pulse/models/team.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Team(BaseModel):
    """Top-level grouping for members and their weekly updates."""

    id: str
    name: str
    created_at: Optional[datetime] = None  # Assigned by the store
