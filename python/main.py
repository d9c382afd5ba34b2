#!/usr/bin/env python3
"""Fix The Interface — repair broken widgets before the clock runs out.

Usage::

    python main.py                      # full mode, level 1
    python main.py -m classic -l 2      # classic rules, start on level 2
    python main.py --seed 7             # reproducible levels
    python main.py --stats              # best score and totals
    python main.py --workshop -l 4      # preview a workshop board
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from backend.models.config import Mode
from backend.models.highscore import HighScoreManager, JsonFileStore

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    mode: Mode = typer.Option(
        Mode.full, "-m", "--mode",
        help="Rule set: full (combos, power-ups, achievements) or classic.",
    ),
    level: int = typer.Option(
        1, "-l", "--level",
        min=1,
        help="Level to start on.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for level generation.",
    ),
    data_dir: Path = typer.Option(
        DATA_DIR, "--data-dir",
        file_okay=False,
        help="Where the best score and stats are kept.",
    ),
    stats: bool = typer.Option(
        False, "--stats",
        help="Show best score and stats and exit.",
    ),
    workshop: bool = typer.Option(
        False, "--workshop",
        help="Preview a workshop-mode board for --level and exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log engine events.",
    ),
) -> None:
    """Fix The Interface."""
    _configure_logging(verbose)

    # Imported late so --help stays fast and works without a terminal.
    from frontend.cli.rich import app as rich_app

    if stats:
        rich_app.show_stats(HighScoreManager(JsonFileStore(data_dir / rich_app.STORAGE_FILE)))
        return

    if workshop:
        rich_app.show_workshop(level, seed)
        return

    rich_app.run(mode, data_dir, level=level, seed=seed)


if __name__ == "__main__":
    app()
