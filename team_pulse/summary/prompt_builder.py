# team_pulse/summary/prompt_builder.py
from typing import Iterable, Protocol


class MemberUpdate(Protocol):
    member_name: str
    update: str


def format_update_lines(updates: Iterable[MemberUpdate]) -> str:
    return "\n".join(f"- {item.member_name}: {item.update}" for item in updates)


def build_prompt(team_name: str, week_key: str, updates: Iterable[MemberUpdate]) -> str:
    """Builds the summary instruction for one team's week.

    Updates are listed in the order given (callers pass newest first).
    """
    return (
        "You are a project manager assistant. Summarize these weekly updates for "
        f"team {team_name} in concise bullet points with:\n"
        "1) Wins\n"
        "2) Risks\n"
        "3) Next week focus\n"
        "\n"
        f"Week: {week_key}\n"
        "\n"
        "Updates:\n"
        f"{format_update_lines(updates)}"
    )
