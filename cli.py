#!/usr/bin/env python3
"""
CLI for playing Learn Cricket in the terminal
"""
import asyncio
import logging
import random

import click
from faker import Faker
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import track

from learn_cricket.config import settings
from learn_cricket.database import init_db
from learn_cricket.engine.adaptive import AdaptiveSelector
from learn_cricket.engine.errors import SupplyExhaustedError
from learn_cricket.engine.events import BallScored, InningsCompleted, OverCompleted, SessionPaused
from learn_cricket.engine.innings import InningsState, OverSummary
from learn_cricket.engine.performance import AggregatePerformance, summarize
from learn_cricket.engine.progress_store import ProgressStore
from learn_cricket.engine.session import SessionOrchestrator, SessionStatus
from learn_cricket.generators.question_generator import QuestionGenerator
from learn_cricket.generators.topics import CRICKET_TOPICS, TOPIC_DESCRIPTIONS, TOPIC_DIFFICULTY

console = Console()
logger = logging.getLogger(__name__)

OPTION_LETTERS = "ABCD"

OUTCOME_STYLES = {
    "6": "bold magenta",
    "4": "bold green",
    "1": "cyan",
    "0": "yellow",
    "W": "bold red",
    "-": "dim",
}


@click.group()
def cli():
    """Learn Cricket - answer fast, score big"""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="[%(asctime)s] %(levelname)s - %(message)s",
    )


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


def _ball_tracker(state: InningsState) -> str:
    bpo = state.balls_per_over
    overs = []
    for start in range(0, len(state.ball_results), bpo):
        balls = state.ball_results[start:start + bpo]
        overs.append(" ".join(f"[{OUTCOME_STYLES[b.symbol]}]{b.symbol}[/]" for b in balls))
    return "  |  ".join(overs)


def _print_over_summary(summary: OverSummary, state: InningsState):
    table = Table(title=f"End of over {summary.over_index + 1}")
    table.add_column("Balls")
    table.add_column("R", justify="right")
    table.add_column("W", justify="right")
    table.add_column("Dots", justify="right")
    table.add_column("Score", style="cyan")
    table.add_row(
        " ".join(b.symbol for b in summary.balls),
        str(summary.runs_in_over),
        str(summary.wickets_in_over),
        str(summary.dots_in_over),
        f"{state.score_display} ({state.overs_display})",
    )
    console.print(table)
    if summary.is_maiden:
        console.print("[yellow]A maiden over![/yellow]")


def _print_scorecard(state: InningsState, summary: dict):
    """Print final innings scorecard and learning summary"""
    card = Table(title="Scorecard")
    card.add_column("Score", style="cyan")
    card.add_column("Overs", justify="right")
    card.add_column("4s", justify="right")
    card.add_column("6s", justify="right")
    card.add_column("1s", justify="right")
    card.add_column("Dots", justify="right")
    card.add_column("SR", justify="right")
    card.add_column("RR", justify="right")
    card.add_row(
        state.score_display,
        state.overs_display,
        str(state.boundaries.fours),
        str(state.boundaries.sixes),
        str(state.singles),
        str(state.dot_balls),
        f"{state.strike_rate:.1f}",
        f"{state.run_rate:.2f}",
    )
    console.print(card)
    console.print(_ball_tracker(state))
    _print_learning_summary(summary)


def _print_learning_summary(summary: dict):
    console.print(Panel("[bold]Learning Summary[/bold]"))
    console.print(f"[cyan]Questions:[/cyan] {summary['total_questions']}")
    console.print(f"[cyan]Accuracy:[/cyan] {summary['accuracy'] * 100:.1f}%")
    console.print(f"[cyan]Best Streak:[/cyan] {summary['best_streak']}")
    console.print(f"[cyan]Avg Response:[/cyan] {summary['average_response_time']:.1f}s")
    console.print(f"[cyan]Level:[/cyan] {summary['performance_level']}")
    if summary["weak_topics"]:
        console.print(f"[red]Work on:[/red] {', '.join(summary['weak_topics'])}")
    if summary["strong_topics"]:
        console.print(f"[green]Strong in:[/green] {', '.join(summary['strong_topics'])}")


def _print_question(session: SessionOrchestrator):
    question = session.current_question
    state = session.state
    lines = [f"[bold]{question.prompt}[/bold]", ""]
    for letter, option in zip(OPTION_LETTERS, question.options):
        lines.append(f"  [cyan]{letter}[/cyan]  {option}")
    console.print(Panel(
        "\n".join(lines),
        title=f"Ball {state.balls_bowled + 1} | {state.score_display} ({state.overs_display})",
        subtitle=f"{question.topic} - {question.difficulty.value}",
    ))


def _subscribe_renderers(session: SessionOrchestrator):
    def on_ball(event: BallScored):
        style = OUTCOME_STYLES[event.outcome.symbol]
        console.print(f"[{style}]{event.outcome.label}[/] ({event.response_time:.1f}s)  {event.state.score_display}")

    def on_over(event: OverCompleted):
        _print_over_summary(event.summary, event.state)

    def on_complete(event: InningsCompleted):
        reason = "All out!" if event.status.value == "all_out" else "Overs complete!"
        console.print(Panel(f"[bold]{reason}[/bold]"))
        _print_scorecard(event.state, event.summary)

    def on_pause(event: SessionPaused):
        console.print(f"[yellow]Session paused after {event.balls_bowled} balls: {event.reason}[/yellow]")

    session.bus.subscribe(BallScored, on_ball)
    session.bus.subscribe(OverCompleted, on_over)
    session.bus.subscribe(InningsCompleted, on_complete)
    session.bus.subscribe(SessionPaused, on_pause)


async def _retry_supply(session: SessionOrchestrator) -> bool:
    while session.status is SessionStatus.PAUSED:
        if not click.confirm("Retry the question supply?", default=True):
            session.abort()
            return False
        try:
            await session.resume()
        except SupplyExhaustedError as e:
            console.print(f"[red]{e}[/red]")
    return True


async def _play(session: SessionOrchestrator):
    try:
        await session.start()
    except SupplyExhaustedError as e:
        console.print(f"[red]{e}[/red]")
        if not await _retry_supply(session):
            return

    while session.status is SessionStatus.AWAITING_ANSWER:
        _print_question(session)
        choice = click.prompt(
            "Your answer (Q to quit)",
            type=click.Choice(list(OPTION_LETTERS) + ["Q"], case_sensitive=False),
        ).upper()
        if choice == "Q":
            session.abort()
            console.print("[yellow]Innings abandoned.[/yellow]")
            _print_learning_summary(session.summary())
            return

        question = session.current_question
        try:
            result = await session.submit_answer(OPTION_LETTERS.index(choice))
        except SupplyExhaustedError as e:
            result = e.result
            console.print(f"[red]{e}[/red]")
            _show_answer(question, result.is_correct)
            if not await _retry_supply(session):
                return
            continue
        _show_answer(question, result.is_correct)


def _show_answer(question, is_correct: bool):
    if not is_correct:
        letter = OPTION_LETTERS[question.correct_option_index]
        console.print(f"[red]Correct answer: {letter} - {question.correct_option}[/red]")
    if question.explanation:
        console.print(f"[dim]{question.explanation}[/dim]")


@cli.command()
@click.option("--key", "session_key", default="default", help="Learner key for stored progress")
@click.option("--seed", type=int, default=None, help="Seed for question order")
def play(session_key: str, seed):
    """Play an innings in the terminal"""
    init_db()
    session = SessionOrchestrator(
        QuestionGenerator(seed=seed),
        ProgressStore(),
        session_key=session_key,
        known_topics=CRICKET_TOPICS,
        **settings.session_options(),
    )
    _subscribe_renderers(session)

    config = session.config
    console.print(Panel(
        f"[bold]Learn Cricket[/bold]\n{config.total_overs} overs, {config.total_wickets} wickets. "
        f"Answer in under {settings.SIX_THRESHOLD:g}s for a six!",
    ))
    asyncio.run(_play(session))


def _load_aggregate(store: ProgressStore, session_key: str):
    snapshot = store.load_progress(session_key)
    if snapshot is None:
        return None
    return AggregatePerformance.from_dict(snapshot)


@cli.command()
@click.option("--key", "session_key", default="default", help="Learner key")
def progress(session_key: str):
    """Show stored learning progress"""
    init_db()
    aggregate = _load_aggregate(ProgressStore(), session_key)
    if aggregate is None:
        console.print(f"[red]No progress stored for '{session_key}'. Play an innings first.[/red]")
        return

    _print_learning_summary(summarize(aggregate, settings.MIN_TOPIC_ATTEMPTS))

    table = Table(title="Topics")
    table.add_column("Topic", style="cyan")
    table.add_column("Base")
    table.add_column("Attempted", justify="right")
    table.add_column("Accuracy", justify="right", style="green")
    table.add_column("About")
    for topic in CRICKET_TOPICS:
        stats = aggregate.topics.get(topic)
        table.add_row(
            topic,
            TOPIC_DIFFICULTY[topic].value,
            str(stats.attempted if stats else 0),
            f"{stats.accuracy * 100:.0f}%" if stats else "-",
            TOPIC_DESCRIPTIONS[topic],
        )
    console.print(table)

    selector = AdaptiveSelector(
        CRICKET_TOPICS,
        focus_count=settings.FOCUS_TOPIC_COUNT,
        min_attempts=settings.MIN_TOPIC_ATTEMPTS,
    )
    rec = selector.recommend(aggregate)
    console.print(
        f"\n[bold]Next up:[/bold] {rec.suggested_difficulty.value} questions "
        f"({rec.knowledge_level.value}) on {', '.join(rec.focus_topics)}"
    )


@cli.command()
@click.option("--key", "session_key", default="default", help="Learner key")
@click.option("--limit", default=10, help="Number of innings to show")
def history(session_key: str, limit: int):
    """List stored innings, newest first"""
    init_db()
    innings = ProgressStore().list_innings(session_key, limit=limit)
    if not innings:
        console.print(f"[red]No innings stored for '{session_key}'.[/red]")
        return

    table = Table(title=f"Innings for {session_key}")
    table.add_column("Played")
    table.add_column("Score", style="cyan")
    table.add_column("Overs", justify="right")
    table.add_column("SR", justify="right")
    table.add_column("Result")
    table.add_column("Balls")
    for record in innings:
        table.add_row(
            (record["played_at"] or "")[:16].replace("T", " "),
            record["score"],
            record["overs"],
            f"{record['strike_rate']:.1f}",
            record["status"].replace("_", " "),
            record["ball_symbols"],
        )
    console.print(table)


@cli.command()
@click.option("--key", "session_key", default="default", help="Learner key")
@click.confirmation_option(prompt="Delete stored progress?")
def reset_progress(session_key: str):
    """Delete stored learning progress"""
    init_db()
    if ProgressStore().reset_progress(session_key):
        console.print(f"[green]Progress for '{session_key}' cleared.[/green]")
    else:
        console.print(f"[yellow]Nothing stored for '{session_key}'.[/yellow]")


class SimulatedClock:
    """Clock advanced by the synthetic responder"""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


async def _simulate_innings(session: SessionOrchestrator, clock: SimulatedClock, rng: random.Random,
                            accuracy: float, mean_time: float):
    await session.start()
    while session.status is SessionStatus.AWAITING_ANSWER:
        question = session.current_question
        clock.now += rng.expovariate(1.0 / mean_time)
        if rng.random() < accuracy:
            choice = question.correct_option_index
        else:
            choice = (question.correct_option_index + rng.randint(1, 3)) % len(question.options)
        await session.submit_answer(choice)


@cli.command()
@click.option("--sessions", default=100, type=click.IntRange(min=1), help="Number of innings to simulate")
@click.option("--accuracy", default=0.75, help="Chance the simulated learner answers correctly")
@click.option("--mean-time", default=5.0, help="Mean response time in seconds")
@click.option("--seed", type=int, default=None, help="Random seed")
def benchmark(sessions: int, accuracy: float, mean_time: float, seed):
    """Simulate innings with a synthetic learner to inspect score distribution"""
    rng = random.Random(seed)
    fake = Faker()
    if seed is not None:
        Faker.seed(seed)

    from collections import defaultdict
    stats = defaultdict(list)

    console.print(f"[yellow]Running {sessions} simulations...[/yellow]")

    for _ in track(range(sessions), description="Simulating..."):
        clock = SimulatedClock()
        session = SessionOrchestrator(
            QuestionGenerator(seed=rng.randrange(1 << 30)),
            session_key=fake.user_name(),
            clock=clock,
            known_topics=CRICKET_TOPICS,
            **settings.session_options(),
        )
        try:
            asyncio.run(_simulate_innings(session, clock, rng, accuracy, mean_time))
        except SupplyExhaustedError as e:
            logger.warning("Simulation for %s stopped early: %s", session.session_key, e)

        state = session.state
        stats["runs"].append(state.runs)
        stats["wickets"].append(state.wickets_lost)
        stats["balls"].append(state.balls_bowled)
        stats["all_out"].append(1 if state.status.value == "all_out" else 0)

    console.print(Panel("[bold]Simulation Statistics[/bold]"))

    all_scores = stats["runs"]
    console.print(f"[cyan]Average Score:[/cyan] {sum(all_scores) / len(all_scores):.1f}")
    console.print(f"[cyan]Min Score:[/cyan] {min(all_scores)}")
    console.print(f"[cyan]Max Score:[/cyan] {max(all_scores)}")
    console.print(f"[cyan]Average Wickets:[/cyan] {sum(stats['wickets']) / len(stats['wickets']):.1f}")
    console.print(f"[cyan]Average Balls:[/cyan] {sum(stats['balls']) / len(stats['balls']):.1f}")
    all_out_pct = sum(stats["all_out"]) / len(stats["all_out"]) * 100
    console.print(f"[cyan]All Out %:[/cyan] {all_out_pct:.1f}%")

    # Score distribution
    max_score = settings.innings_config().total_balls * 6
    step = max(1, max_score // 5)
    brackets = {}
    for low in range(0, max_score + 1, step):
        brackets[f"{low}-{low + step - 1}"] = sum(1 for s in all_scores if low <= s < low + step)

    console.print("\n[bold]Score Distribution:[/bold]")
    for bracket, count in brackets.items():
        pct = count / len(all_scores) * 100
        bar = "█" * int(pct / 2)
        console.print(f"  {bracket:>8}: {bar} {pct:.1f}%")


if __name__ == "__main__":
    cli()
