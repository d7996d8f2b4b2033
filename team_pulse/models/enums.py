from enum import Enum


class Collection(str, Enum):
    """Team-scoped tables that can be subscribed to."""

    WEEKLY_INPUTS = "weekly_inputs"
    SUMMARIES = "summaries"


class ChangeEvent(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ALL = "*"
