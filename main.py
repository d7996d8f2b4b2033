import sys
import asyncio
from typing import Optional, Tuple

# --- Settings/Logging ---
from team_pulse.logging.setup import setup_logging
from team_pulse.config.settings import AppSettings, settings

setup_logging()

from loguru import logger

from team_pulse.errors import ConfigurationError
from team_pulse.storage.gateway import RemoteDataGateway
from team_pulse.storage.supabase_client import SupabaseService
from team_pulse.summary.gemini_client import GeminiClient
from team_pulse.workflow.controller import WorkflowController

from rich import print
from rich.panel import Panel
from rich.prompt import Prompt

COMMANDS = "team | open | week | add | list | summary | quit"


async def bootstrap(
    app_settings: AppSettings,
) -> Tuple[SupabaseService, Optional[RemoteDataGateway], str]:
    """Starts the store service; a failure disables store operations only."""
    service = SupabaseService(app_settings)
    config_error = app_settings.store_config_error
    if config_error:
        logger.warning(config_error)
        return service, None, config_error
    try:
        client = await service.init()
    except ConfigurationError as e:
        return service, None, str(e)
    return service, RemoteDataGateway(client), ""


async def ask(label: str, default: Optional[str] = None) -> str:
    # Prompt in a worker thread so realtime callbacks keep flowing
    if default is None:
        return await asyncio.to_thread(Prompt.ask, label)
    return await asyncio.to_thread(Prompt.ask, label, default=default)


def show_state(controller: WorkflowController) -> None:
    state = controller.state
    team = state.active_team.name if state.active_team else "none"
    lines = [f"Active team: {team}", f"Week: {state.week_key}", ""]
    lines.append(f"This week entries ({len(state.week_entries)})")
    lines.extend(f"  {item.member_name}: {item.update}" for item in state.week_entries)
    print(Panel("\n".join(lines), title="Weekly Inputs"))
    for summary in state.summaries:
        print(Panel(summary.content, title=summary.week_key))


def show_error(controller: WorkflowController) -> None:
    if controller.state.error:
        print(f"[bold red]{controller.state.error}[/bold red]")


async def run_console(controller: WorkflowController) -> None:
    state = controller.state
    print(Panel(f"Commands: {COMMANDS}", title="Weekly Team Activity Tracker"))
    while True:
        command = (await ask("Command")).strip().lower()
        if command in {"quit", "exit", "q"}:
            return
        if command == "team":
            state.team_name = await ask("Team name")
            if await controller.create_team():
                print(f"[green]Active team: {state.active_team.name} ({state.active_team.id})[/green]")
        elif command == "open":
            if await controller.open_team(await ask("Team id")):
                print(f"[green]Active team: {state.active_team.name}[/green]")
        elif command == "week":
            controller.set_week_key(await ask("Week", default=state.week_key))
        elif command == "add":
            state.member_name = await ask("Team member", default=state.member_name or None)
            state.update = await ask("Update")
            if await controller.add_weekly_input():
                print("[green]Weekly input saved.[/green]")
        elif command == "list":
            show_state(controller)
        elif command == "summary":
            print("Generating...")
            if await controller.generate_summary():
                print("[green]Summary saved.[/green]")
                show_state(controller)
        else:
            print(f"Unknown command. Use one of: {COMMANDS}")
        show_error(controller)


async def main() -> None:
    """Main entry point for the application."""
    logger.info("Starting Team Pulse")

    service, gateway, config_error = await bootstrap(settings)
    summarizer = GeminiClient.from_settings(settings)
    controller = WorkflowController(gateway, summarizer, config_error=config_error)
    try:
        if not controller.start():
            show_error(controller)
        await run_console(controller)
    finally:
        await controller.shutdown()
        await summarizer.close()
        await service.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
