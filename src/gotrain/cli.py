#!/usr/bin/env python3
"""
GoTrain CLI.

AI weekly training plans from your Strava (and Hevy) history.

Usage:
    gotrain connect                 # Print the Strava authorization URL
    gotrain authorize CODE          # Finish connecting with the redirect code
    gotrain goals --goal "Sub-50 10K" --days 4 --level intermediate
    gotrain goals --toggle cycling  # Add/remove a preferred activity
    gotrain refresh                 # Refresh last week's activities
    gotrain history                 # Show cached activities and strength stats
    gotrain plan generate           # Generate a new weekly plan
    gotrain plan show
    gotrain plan export
    gotrain chat "Move the long run to Sunday"
    gotrain transcript
    gotrain disconnect
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import httpx
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import get_settings
from .exceptions import ConfigurationError, GoTrainError
from .integrations.base import IntegrationError
from .models.chat import ChatRole
from .models.goals import ACTIVITY_OPTIONS, FitnessLevel, UserGoals, toggle_activity
from .models.plan import Intensity, WeeklyPlan
from .services.coach import CoachService

console = Console()


def get_intensity_color(intensity: str) -> str:
    """Get rich color for an activity intensity."""
    colors = {
        Intensity.EASY.value: "green",
        Intensity.MODERATE.value: "blue",
        Intensity.HARD.value: "dark_orange",
        Intensity.MAX.value: "red",
    }
    return colors.get(intensity, "white")


def render_plan(plan: WeeklyPlan, distance_label: str) -> None:
    """Print a weekly plan as a summary panel and a day table."""
    console.print(Panel(Text(plan.weekly_summary), title="Weekly Summary", box=box.ROUNDED))

    table = Table(title=f"Weekly Plan ({distance_label})", box=box.ROUNDED, show_lines=True)
    table.add_column("Day", style="cyan")
    table.add_column("Date")
    table.add_column("Title", style="bold")
    table.add_column("Activities")
    table.add_column("Coach Tips", style="italic")

    for day in plan.days:
        activities = Text()
        for i, activity in enumerate(day.activities):
            if i:
                activities.append("\n")
            activities.append(activity.name)
            if activity.duration != "":
                activities.append(f" ({activity.duration})")
            if activity.intensity:
                activities.append(f" {activity.intensity}", style=get_intensity_color(activity.intensity))
            for exercise in activity.exercises or []:
                line = f"\n  - {exercise.name}"
                if exercise.sets is not None and exercise.reps is not None:
                    line += f" {exercise.sets}x{exercise.reps}"
                if exercise.weight is not None:
                    line += f" @ {exercise.weight}"
                activities.append(line, style="dim")

        table.add_row(
            str(day.day_number),
            day.date or "",
            Text(day.title, style="dim" if day.is_rest else ""),
            activities,
            Text("\n".join(day.coach_tips)),
        )

    console.print(table)


def cmd_connect(args, service: CoachService):
    """Print the Strava authorization URL."""
    settings = get_settings()
    if not settings.strava_client_id:
        raise ConfigurationError("strava_client_id")

    console.print()
    console.print(Panel("[bold]GoTrain - Connect Strava[/bold]"))
    console.print("Open this URL, approve access, then copy the 'code' from the redirect:")
    console.print()
    console.print(service.token_provider.authorization_url(), soft_wrap=True)
    console.print()
    console.print("Then run:  gotrain authorize CODE")


async def cmd_authorize(args, service: CoachService):
    """Exchange the authorization code for tokens."""
    await service.connect(args.code)
    credentials = service.token_provider.load_credentials()
    name = credentials.athlete_name if credentials else None
    console.print(f"[green]Connected to Strava{f' as {name}' if name else ''}.[/green]")


def cmd_disconnect(args, service: CoachService):
    """Forget credentials and clear the session (goals are kept)."""
    service.disconnect()
    console.print("[green]Disconnected. Plan, chat and cached activities cleared.[/green]")


def _print_goals(goals: Optional[UserGoals]) -> None:
    if goals is None:
        console.print("[yellow]No goals saved yet.[/yellow]")
        console.print("Set them with, e.g.:  gotrain goals --goal \"Run a half\" --days 4")
        return

    labels = dict(ACTIVITY_OPTIONS)
    table = Table(title="Training Goals", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Main goal", goals.main_goal or "-")
    table.add_row("Days per week", str(goals.days_per_week))
    table.add_row("Fitness level", goals.fitness_level.value)
    table.add_row(
        "Activities",
        ", ".join(labels.get(tag, tag) for tag in goals.preferred_activities),
    )
    table.add_row("Considerations", goals.considerations or "-")
    console.print(table)


def cmd_goals(args, service: CoachService):
    """Show, set, toggle or reset training goals."""
    if args.reset:
        service.reset_goals()
        console.print("[green]Goals reset.[/green]")
        return

    goals = service.get_goals()
    updates = {}
    if args.goal is not None:
        updates["main_goal"] = args.goal
    if args.days is not None:
        updates["days_per_week"] = args.days
    if args.level is not None:
        updates["fitness_level"] = FitnessLevel(args.level)
    if args.activities is not None:
        updates["preferred_activities"] = [a.strip() for a in args.activities.split(",") if a.strip()]
    if args.considerations is not None:
        updates["considerations"] = args.considerations or None

    if updates or args.toggle:
        base = goals or UserGoals()
        goals = UserGoals.model_validate({**base.model_dump(), **updates})
        if args.toggle:
            goals = toggle_activity(goals, args.toggle)
        service.save_goals(goals)
        console.print("[green]Goals saved![/green]")

    _print_goals(goals)


async def cmd_refresh(args, service: CoachService):
    """Refresh last week's activities (and strength stats when configured)."""
    activities = await service.refresh_activities()
    console.print(f"[green]Fetched {len(activities)} activities from the last 7 days.[/green]")
    if service.hevy_client is not None:
        stats = await service.refresh_strength_stats()
        console.print(f"[green]Updated strength stats for {len(stats)} exercises.[/green]")


def cmd_history(args, service: CoachService):
    """Show cached activities and strength stats."""
    units = service.units
    activities = service.get_cached_activities()

    table = Table(title="Recent Activities", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column(f"Distance ({units.distance_label})", justify="right")
    table.add_column("Time (min)", justify="right")
    for a in activities:
        table.add_row(
            a.start_date.strftime("%Y-%m-%d"),
            a.name,
            a.type,
            f"{units.convert_distance(a.distance_m):.1f}",
            f"{a.moving_time_min:.0f}",
        )
    if activities:
        console.print(table)
    else:
        console.print("[yellow]No cached activities. Run: gotrain refresh[/yellow]")

    stats = service.get_cached_strength_stats()
    if stats:
        weight_unit = units.weight.value
        stats_table = Table(title="Strength Stats", box=box.ROUNDED)
        stats_table.add_column("Exercise", style="cyan")
        stats_table.add_column(f"Est. 1RM ({weight_unit})", justify="right")
        stats_table.add_column(f"Last ({weight_unit} x reps)", justify="right")
        for s in stats:
            stats_table.add_row(
                s.exercise_name,
                f"{units.convert_weight(s.one_rep_max):.1f}",
                f"{units.convert_weight(s.last_weight):.1f} x {s.last_reps}",
            )
        console.print(stats_table)


def _show_current_plan(service: CoachService) -> None:
    plan = service.get_plan()
    if plan is not None:
        render_plan(plan, service.units.distance_label)
        return

    raw = service.plan_store.raw_text
    if raw is None:
        console.print("[yellow]No plan yet. Run: gotrain plan generate[/yellow]")
        return

    console.print("[yellow]The current plan could not be parsed; showing it as received.[/yellow]")
    console.print(raw, markup=False, highlight=False)


async def cmd_plan(args, service: CoachService):
    """Generate, show or export the weekly plan."""
    if args.action == "generate":
        with console.status("Generating your weekly plan..."):
            result = await service.generate_plan()
        if not result.ok:
            console.print(f"[yellow]Plan did not parse: {escape(result.reason)}[/yellow]")
        _show_current_plan(service)
    elif args.action == "export":
        text = service.export_plan_text()
        if text is None:
            console.print("[yellow]No plan to export.[/yellow]")
            return
        print(text)
    else:
        _show_current_plan(service)


async def cmd_chat(args, service: CoachService):
    """Send a message to the coach."""
    with console.status("Coach is thinking..."):
        reply = await service.send_message(args.message)
    console.print(Panel(Text(reply.display_message), title="Coach", box=box.ROUNDED))
    if reply.plan_replaced:
        _show_current_plan(service)


def cmd_transcript(args, service: CoachService):
    """Show the coach conversation."""
    messages = service.get_messages()
    if not messages:
        console.print("[yellow]No messages yet.[/yellow]")
        return
    for message in messages:
        if message.role == ChatRole.USER:
            console.print(f"[bold cyan]You:[/bold cyan] {escape(message.content)}")
        else:
            console.print(f"[bold green]Coach:[/bold green] {escape(message.content)}")
        console.print()


COMMANDS = {
    "connect": cmd_connect,
    "authorize": cmd_authorize,
    "disconnect": cmd_disconnect,
    "goals": cmd_goals,
    "refresh": cmd_refresh,
    "history": cmd_history,
    "plan": cmd_plan,
    "chat": cmd_chat,
    "transcript": cmd_transcript,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gotrain",
        description="GoTrain - AI weekly training plans",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gotrain connect
  gotrain authorize 1a2b3c
  gotrain goals --goal "Sub-50 10K" --days 4 --activities running,weightlifting
  gotrain plan generate
  gotrain chat "Make Thursday easier"
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("connect", help="Print the Strava authorization URL")

    authorize_p = subparsers.add_parser("authorize", help="Finish connecting Strava")
    authorize_p.add_argument("code", help="Authorization code from the redirect URL")

    subparsers.add_parser("disconnect", help="Disconnect Strava and clear the session")

    goals_p = subparsers.add_parser("goals", help="Show or set training goals")
    goals_p.add_argument("--goal", type=str, help="Main goal, e.g. 'Run a half marathon'")
    goals_p.add_argument("--days", type=int, choices=range(1, 8), help="Training days per week")
    goals_p.add_argument(
        "--level",
        choices=[level.value for level in FitnessLevel],
        help="Fitness level",
    )
    goals_p.add_argument(
        "--activities",
        type=str,
        help=f"Comma-separated activities ({', '.join(tag for tag, _ in ACTIVITY_OPTIONS)})",
    )
    goals_p.add_argument("--considerations", type=str, help="Injuries or constraints")
    goals_p.add_argument("--toggle", type=str, metavar="TAG", help="Add/remove one activity")
    goals_p.add_argument("--reset", action="store_true", help="Delete saved goals")

    subparsers.add_parser("refresh", help="Refresh recent activities")
    subparsers.add_parser("history", help="Show cached activities and strength stats")

    plan_p = subparsers.add_parser("plan", help="Generate, show or export the plan")
    plan_p.add_argument(
        "action",
        nargs="?",
        choices=["generate", "show", "export"],
        default="show",
    )

    chat_p = subparsers.add_parser("chat", help="Ask the coach to adjust the plan")
    chat_p.add_argument("message", help="Message to the coach")

    subparsers.add_parser("transcript", help="Show the coach conversation")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
    )


async def run_command(args, service: CoachService) -> None:
    handler = COMMANDS[args.command]
    try:
        result = handler(args, service)
        if asyncio.iscoroutine(result):
            await result
    finally:
        await service.close()


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    configure_logging(args.verbose)

    try:
        service = CoachService.from_settings(get_settings())
        asyncio.run(run_command(args, service))
    except (GoTrainError, IntegrationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Network error: {escape(str(e))}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid input: {escape(e.errors()[0]['msg'])}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
