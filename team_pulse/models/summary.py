from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Summary(BaseModel):
    """Generated synthesis of a week's inputs. Several may exist per week."""

    model_config = ConfigDict(frozen=True)

    id: str
    team_id: str
    week_key: str
    content: str
    created_at: Optional[datetime] = None
