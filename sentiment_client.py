#!/usr/bin/env python3
"""
Sentiment Client

Interactive terminal client for a remote RNN/LSTM sentiment service.
Type text to have it classified, switch between the two models, and
keep an eye on the last five results.

Usage:
    python sentiment_client.py                                 # interactive
    python sentiment_client.py --model rnn                     # start with RNN selected
    python sentiment_client.py --text "Great film!"            # one-shot
    python sentiment_client.py --api-url http://10.0.0.5:8000  # other backend
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from sentiment_core.config import Settings
from sentiment_core.core.controller import RequestController
from sentiment_core.core.transport import PredictTransport
from sentiment_core.errors import ConfigError
from sentiment_core.logger import setup_logger
from sentiment_core.models import (
    AnalysisResult, HistoryEntry, ModelName, Success, EXAMPLE_TEXTS,
)


PROMPT = "[bold magenta]>[/bold magenta] "

HELP_TEXT = """\
[bold]Type any text[/bold] and press Enter to analyze it.
Press Enter on an empty line to analyze the current input again.

  :model rnn|lstm   switch model
  :example N        load quick example N (1-3)
  :clear            clear input, result and error
  :history          show recent analyses
  :help             show this help
  :quit             exit"""


def format_confidence(confidence: float) -> str:
    return f"{confidence * 100:.1f}%"


def label_style(label: str) -> str:
    return 'bold green' if label == 'Positive' else 'bold red'


def render_result(result: AnalysisResult) -> Panel:
    """Result card: label, confidence, processing time, model and confidence bar"""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="dim")
    grid.add_column()
    grid.add_row("Sentiment", Text(result.label, style=label_style(result.label)))
    grid.add_row("Confidence", format_confidence(result.confidence))
    grid.add_row("Processing Time", f"{result.meta.time_ms} ms")
    grid.add_row("Model Used", result.meta.model)

    bar = ProgressBar(
        total=100,
        completed=result.confidence * 100,
        width=40,
        complete_style='green' if result.label == 'Positive' else 'red',
    )
    return Panel(Group(grid, Text(""), bar), title="Analysis Result", border_style="magenta")


def render_history(entries: List[HistoryEntry]) -> Table:
    table = Table(title="Recent Analyses", show_lines=False)
    table.add_column("Time", style="dim")
    table.add_column("Text")
    table.add_column("Sentiment")
    table.add_column("Confidence", justify="right")
    table.add_column("Model")
    table.add_column("Latency", justify="right")

    for entry in entries:
        table.add_row(
            entry.submitted_at,
            entry.text_preview,
            Text(entry.label, style=label_style(entry.label)),
            format_confidence(entry.confidence),
            ModelName.DISPLAY.get(entry.model, entry.model),
            f"{entry.time_ms}ms",
        )
    return table


def render_error(message: str) -> Panel:
    return Panel(Text(message, style="red"), title="Error", border_style="red")


def render_state(controller: RequestController, console: Console):
    """Print whatever the controller currently has to show"""
    if controller.error_message:
        console.print(render_error(controller.error_message))
    if controller.current_result is not None:
        console.print(render_result(controller.current_result))


async def submit_and_render(controller: RequestController, console: Console):
    with console.status("Analyzing...", spinner="dots"):
        outcome = await controller.submit()
    render_state(controller, console)
    if isinstance(outcome, Success) and controller.history:
        console.print(render_history(controller.history))
    return outcome


def handle_command(controller: RequestController, console: Console, line: str) -> bool:
    """
    Run one ':' command.

    Returns:
        False when the session should end, True otherwise
    """
    parts = line[1:].split()
    command = parts[0].lower() if parts else ''
    args = parts[1:]

    if command in ('quit', 'exit', 'q'):
        return False

    if command == 'help':
        console.print(HELP_TEXT)
    elif command == 'model':
        if not args:
            console.print(f"Current model: [bold]{ModelName.DISPLAY[controller.selected_model]}[/bold]")
        else:
            try:
                controller.set_model(args[0])
                console.print(f"Model set to [bold]{ModelName.DISPLAY[controller.selected_model]}[/bold]")
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
    elif command == 'example':
        try:
            index = int(args[0]) - 1
            if not 0 <= index < len(EXAMPLE_TEXTS):
                raise IndexError(index)
        except (IndexError, ValueError):
            console.print(f"[red]Usage: :example N (1-{len(EXAMPLE_TEXTS)})[/red]")
        else:
            controller.load_example(index)
            console.print(f"Input: [italic]{controller.input_text}[/italic]  [dim]({controller.char_counter})[/dim]")
            console.print("[dim]Press Enter to analyze.[/dim]")
    elif command == 'clear':
        controller.clear()
        console.print("[dim]Cleared.[/dim]")
    elif command == 'history':
        if controller.history:
            console.print(render_history(controller.history))
        else:
            console.print("[dim]No analyses yet.[/dim]")
    else:
        console.print(f"[red]Unknown command: {line}[/red]  (try :help)")
    return True


async def run_interactive(controller: RequestController, console: Console):
    console.print(Panel(
        "Analyze text sentiment using RNN or LSTM neural networks",
        title="[bold]Sentiment Analyzer[/bold]",
        border_style="magenta",
    ))
    console.print(HELP_TEXT)
    console.print(f"\nModel: [bold]{ModelName.DISPLAY[controller.selected_model]}[/bold]\n")

    while True:
        try:
            line = await asyncio.to_thread(console.input, PROMPT)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        stripped = line.strip()
        if stripped.startswith(':'):
            if not handle_command(controller, console, stripped):
                break
            continue

        if stripped:
            controller.set_text(line)
            if len(line) > len(controller.input_text):
                console.print(f"[yellow]Input cut to {controller.char_counter}[/yellow]")
        await submit_and_render(controller, console)


async def run_once(controller: RequestController, console: Console, text: str) -> int:
    controller.set_text(text)
    outcome = await submit_and_render(controller, console)
    return 0 if isinstance(outcome, Success) else 1


async def run(settings: Settings, text: Optional[str], console: Console) -> int:
    async with PredictTransport(settings.api_url, timeout=settings.timeout) as transport:
        controller = RequestController(
            transport,
            default_model=settings.default_model,
            report_rejections=settings.report_rejections,
        )
        if text is not None:
            return await run_once(controller, console, text)
        await run_interactive(controller, console)
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for the sentiment client.

    Exit codes:
        0 - Interactive session ended normally, or --text was analyzed
        1 - --text failed (empty input, backend unreachable, rejected)
        2 - Invalid configuration

    Environment variables used:
        SENTIMENT_API_URL, SENTIMENT_DEFAULT_MODEL, SENTIMENT_TIMEOUT,
        SENTIMENT_REPORT_REJECTIONS, DEBUG_SENTIMENT (see sentiment_core.config)
    """
    parser = argparse.ArgumentParser(
        description="Interactive client for the RNN/LSTM sentiment service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive session against a local backend
  %(prog)s

  # Analyze one text with the RNN model and exit
  %(prog)s --model rnn --text "Terrible experience. Would not recommend to anyone."

  # Show service-side rejections instead of ignoring them
  %(prog)s --report-rejections
        """
    )
    parser.add_argument('--api-url', help='Service base URL (overrides SENTIMENT_API_URL)')
    parser.add_argument('--model', choices=ModelName.ALL, help='Initial model (default: lstm)')
    parser.add_argument('--timeout', type=float, help='Request timeout in seconds')
    parser.add_argument('--text', help='Analyze this text once and exit')
    parser.add_argument('--report-rejections', action='store_true', default=None,
                        help='Show an error when the service answers success=false')
    parser.add_argument('--debug', action='store_true', default=None, help='Enable debug logging')

    args = parser.parse_args(argv)
    console = Console()

    try:
        settings = Settings.from_env(
            api_url=args.api_url,
            default_model=args.model,
            timeout=args.timeout,
            report_rejections=args.report_rejections,
            debug=args.debug,
        )
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 2

    setup_logger(level=logging.DEBUG if settings.debug else logging.WARNING)

    try:
        return asyncio.run(run(settings, args.text, console))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped[/dim]")
        return 0


if __name__ == '__main__':
    sys.exit(main())
