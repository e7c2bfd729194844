"""Command-line interface for the anime/manga tracker."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from .app import WatchlistApp
from .config import LOG_LEVELS, Settings, get_settings, reload_settings
from .constants import CATEGORY_ORDER, LIST_ORDER, Category, ListKind
from .events import EventSource
from .exceptions import InputError, ParseError, ReadError
from .navigation import NavigationState
from .store import Store
from .terminal import TerminalKeyReader
from .view import build_frame, render_frame

logger = logging.getLogger(__name__)


def setup_logging(level: str, log_file: Optional[Path] = None):
    """Configure logging for the application.

    With a log file the screen is left to the UI; otherwise logs go to stderr.
    """
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler],
        force=True,
    )


def _load_settings(config: Optional[Path]) -> Settings:
    if config is not None:
        return reload_settings(config)
    return get_settings()


def _load_store(path: Path) -> Store:
    """Load the record file or exit with a diagnostic."""
    try:
        return Store.load(path)
    except (ReadError, ParseError) as e:
        logger.error(f"Failed to load record file: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Record file (overrides config and ANIMANGA_DB_PATH)",
)
config_option = click.option(
    "--config",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: data/config.yaml)",
)


@click.group()
@click.version_option(version="0.1.0")
def main():
    """Terminal tracker for anime and manga watch-lists."""
    pass


@main.command()
@db_option
@config_option
@click.option(
    "--tick-ms",
    type=click.IntRange(min=1),
    default=None,
    help="Redraw interval in milliseconds (default: 200)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default=None,
    help="Logging level",
)
def tui(db_path: Optional[Path], config: Optional[Path], tick_ms: Optional[int], log_level: Optional[str]):
    """Browse and edit the lists interactively."""
    settings = _load_settings(config)
    setup_logging(log_level or settings.log_level, settings.log_file)

    store = _load_store(db_path or settings.db_path)
    tick_interval = tick_ms / 1000.0 if tick_ms else settings.tick_interval

    app = WatchlistApp(store, notice_ticks=settings.notice_ticks)
    source = EventSource(TerminalKeyReader(), tick_interval=tick_interval)
    try:
        app.run(source)
    except InputError as e:
        logger.error(f"Terminal input failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@db_option
@config_option
@click.option(
    "--list",
    "list_kind",
    type=click.Choice([kind.value for kind in LIST_ORDER]),
    default=ListKind.ANIME.value,
    help="Which list to print",
)
@click.option(
    "--category",
    type=click.Choice([category.value for category in CATEGORY_ORDER]),
    default=Category.ALL.value,
    help="Status filter",
)
def show(db_path: Optional[Path], config: Optional[Path], list_kind: str, category: str):
    """Print one list without entering the interactive view."""
    settings = _load_settings(config)
    setup_logging(settings.log_level)
    store = _load_store(db_path or settings.db_path)

    nav = NavigationState(active_list=ListKind(list_kind), active_category=Category(category))
    nav.clamp_all(store)
    frame = build_frame(nav, store)
    frame.selected_row = None
    frame.help = []
    Console().print(render_frame(frame))


@main.command()
@db_option
@config_option
def check(db_path: Optional[Path], config: Optional[Path]):
    """Check that the record file loads."""
    settings = _load_settings(config)
    setup_logging(settings.log_level)
    path = db_path or settings.db_path
    store = _load_store(path)

    click.echo(f"[OK] {path}")
    for kind in LIST_ORDER:
        counts = store.counts(kind)
        details = ", ".join(
            f"{category.label}: {counts[category]}" for category in CATEGORY_ORDER[1:]
        )
        click.echo(f"  {kind.label}: {counts[Category.ALL]} entries ({details})")


if __name__ == "__main__":
    main()
