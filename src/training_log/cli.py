#!/usr/bin/env python3
"""
Training Log CLI.

Analytics over a training-log JSON document.

Usage:
    training-log reconcile [--write]   # Renumber titles, recompute PB / SB flags
    training-log predict               # Race predictions and fitness score
    training-log fitness --days 14     # Fitness, fatigue and form
    training-log alerts                # Advisory training alerts
    training-log intervals SESSION_ID  # Pacing consistency of one session

The document is read from --file, else TRAINING_LOG_DATA_FILE.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .analysis.alerts import generate_training_alerts
from .analysis.intervals import analyze_interval_session, summarize_session
from .analysis.prediction import fitness_score_from_predictions, generate_race_predictions, predict_goal
from .analysis.records import reconcile_records
from .config import get_settings
from .exceptions import SessionNotFoundError, TrainingLogError
from .metrics.fitness import calculate_training_stress, classify_form, summarize_training_stress
from .models.analytics import AlertLevel, FormBand
from .models.profile import TrainingLog
from .store import load_training_log, save_training_log
from .utils.log_sanitizer import configure_logging

logger = logging.getLogger(__name__)

console = Console()


def get_form_color(band: FormBand) -> str:
    """Get rich color for a form band."""
    colors = {
        FormBand.FRESH: "green",
        FormBand.MAINTENANCE: "blue",
        FormBand.OPTIMAL: "yellow",
        FormBand.OVERREACHING: "red",
    }
    return colors.get(band, "white")


def get_alert_color(level: AlertLevel) -> str:
    """Get rich color for an alert level."""
    colors = {
        AlertLevel.INFO: "blue",
        AlertLevel.WARNING: "yellow",
        AlertLevel.DANGER: "red",
    }
    return colors.get(level, "white")


def format_form_rich(form: float) -> Text:
    """Format form with its band color."""
    text = Text(f"{form:+.1f}")
    text.stylize(get_form_color(classify_form(form)))
    return text


def cmd_reconcile(args, log: TrainingLog, path: Path) -> int:
    """Recompute titles and record flags."""
    console.print()
    console.print(Panel("[bold]Training Log - Records[/bold]"))
    console.print()

    active = log.active_season
    sessions = reconcile_records(
        log.sessions,
        profile_pbs=log.profile.pbs,
        seasons=log.seasons,
        active_season_start=active.start_date if active else None,
    )

    changed = sum(
        1
        for before, after in zip(sorted(log.sessions, key=lambda s: s.id), sorted(sessions, key=lambda s: s.id))
        if (before.title, before.is_personal_best, before.is_season_best)
        != (after.title, after.is_personal_best, after.is_season_best)
    )

    table = Table(title="Records", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("Title")
    table.add_column("Summary")
    table.add_column("Flag", justify="center")

    for session in sessions:
        if not (session.is_personal_best or session.is_season_best):
            continue
        flag = "[green]PB[/green]" if session.is_personal_best else "[yellow]SB[/yellow]"
        day = session.date.date().isoformat() if session.date else "-"
        table.add_row(day, session.title, summarize_session(session), flag)

    console.print(table)
    console.print()
    console.print(f"{len(sessions)} sessions reconciled, {changed} changed.")

    if args.write:
        save_training_log(path, log.model_copy(update={"sessions": sessions}))
        console.print(f"[green]Saved to {path}[/green]")
    elif changed:
        console.print("Run with --write to save the changes.")
    console.print()
    return 0


def cmd_predict(args, log: TrainingLog, path: Path) -> int:
    """Show race predictions."""
    console.print()
    console.print(Panel("[bold]Training Log - Race Predictions[/bold]"))
    console.print()

    predictions = generate_race_predictions(log.sessions)

    table = Table(title="Predicted Race Times", box=box.ROUNDED)
    table.add_column("Distance", style="cyan")
    table.add_column("Time", justify="right")
    table.add_column("Pace", justify="right")
    table.add_column("Based on")

    for prediction in predictions:
        table.add_row(
            prediction.distance_name,
            prediction.predicted_time,
            prediction.formatted_pace,
            ", ".join(prediction.components) or "-",
        )

    console.print(table)
    console.print()

    score = fitness_score_from_predictions(predictions)
    if score:
        console.print(f"Fitness score: [bold]{score}[/bold]")
    else:
        console.print("[yellow]Not enough quality sessions for a fitness score.[/yellow]")

    for goal in log.goals:
        prediction = predict_goal(goal, predictions)
        if prediction:
            console.print(f"Goal {goal.name}: target {goal.target_time}, predicted {prediction.predicted_time}")
    console.print()
    return 0


def cmd_fitness(args, log: TrainingLog, path: Path) -> int:
    """Show fitness, fatigue and form."""
    console.print()
    console.print(Panel("[bold]Training Log - Fitness[/bold]"))
    console.print()

    points = calculate_training_stress(log.sessions, today=date.today())
    if not points:
        console.print("No dated sessions yet.")
        console.print()
        return 0

    table = Table(title=f"Fitness (Last {args.days} Days)", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("Load", justify="right")
    table.add_column("Fitness", justify="right")
    table.add_column("Fatigue", justify="right")
    table.add_column("Form", justify="right")

    for point in points[-args.days:]:
        table.add_row(
            point.date.isoformat(),
            f"{point.load:.0f}",
            f"{point.fitness:.1f}",
            f"{point.fatigue:.1f}",
            format_form_rich(point.form),
        )

    console.print(table)
    console.print()

    summary = summarize_training_stress(points)
    band = FormBand(summary["band"])
    color = get_form_color(band)
    console.print(f"[{color}]{summary['band_description']}[/{color}]: {summary['recommendation']}")
    console.print()
    return 0


def cmd_alerts(args, log: TrainingLog, path: Path) -> int:
    """Show training alerts."""
    console.print()
    console.print(Panel("[bold]Training Log - Alerts[/bold]"))
    console.print()

    alerts = generate_training_alerts(log.sessions)
    if not alerts:
        console.print("[green]No alerts. Training looks balanced.[/green]")
        console.print()
        return 0

    for alert in alerts:
        color = get_alert_color(alert.level)
        body = alert.message
        if alert.metric:
            body += f"\n[dim]{alert.metric}[/dim]"
        console.print(Panel(body, title=f"[{color}]{alert.level.value}[/{color}] {alert.title}", box=box.ROUNDED))
    console.print()
    return 0


def cmd_intervals(args, log: TrainingLog, path: Path) -> int:
    """Show interval consistency for one session."""
    session = log.get_session(args.session_id)
    if session is None:
        raise SessionNotFoundError(args.session_id)

    console.print()
    console.print(Panel(f"[bold]{session.title or session.kind.label}[/bold]\n{summarize_session(session)}"))
    console.print()

    analysis = analyze_interval_session(session)
    if analysis is None:
        console.print("[yellow]This session has no reps or splits to analyze.[/yellow]")
        console.print()
        return 0

    table = Table(title="Rep Groups", box=box.ROUNDED)
    table.add_column("Distance", style="cyan")
    table.add_column("Reps", justify="right")
    table.add_column("Average", justify="right")
    table.add_column("Best", justify="right")
    table.add_column("Variation", justify="right")
    table.add_column("Pace", justify="right")

    for group in analysis.groups:
        table.add_row(
            group.label,
            str(group.count),
            f"{group.avg_time:.1f}s",
            f"{group.best_time:.1f}s",
            f"{group.variation:.1f}%",
            group.pace,
        )

    console.print(table)
    console.print()
    console.print(
        f"Score [bold]{analysis.score}[/bold]/100 - {analysis.consistency_label} "
        f"({analysis.variation:.1f}% variation, {analysis.quality_volume:.1f} km quality)"
    )
    console.print()
    return 0


COMMANDS = {
    "reconcile": cmd_reconcile,
    "predict": cmd_predict,
    "fitness": cmd_fitness,
    "alerts": cmd_alerts,
    "intervals": cmd_intervals,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="training-log",
        description="Analytics over a training-log document",
    )
    parser.add_argument(
        "--file",
        type=Path,
        help="Training-log JSON document (default: TRAINING_LOG_DATA_FILE)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: TRAINING_LOG_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    reconcile_p = subparsers.add_parser("reconcile", help="Renumber titles and recompute PB / SB flags")
    reconcile_p.add_argument(
        "--write",
        action="store_true",
        help="Save the reconciled sessions back to the document",
    )

    subparsers.add_parser("predict", help="Show race predictions")

    fitness_p = subparsers.add_parser("fitness", help="Show fitness, fatigue and form")
    fitness_p.add_argument(
        "--days",
        type=int,
        default=14,
        help="Number of days to show (default: 14)",
    )

    subparsers.add_parser("alerts", help="Show training alerts")

    intervals_p = subparsers.add_parser("intervals", help="Analyze interval consistency of a session")
    intervals_p.add_argument("session_id", type=str, help="Session ID")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 1

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)
    path = args.file or settings.data_file

    try:
        log = load_training_log(path)
        return COMMANDS[args.command](args, log, path)
    except TrainingLogError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        logger.debug(f"{e!r} details={e.details}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
