"""
noteboard command line.

    noteboard layout 3 --width 1200 --height 800
    noteboard replay script.json --board board.json --output board.json --oplog
    noteboard check board.json

A replay script is a JSON list of decoded requests, e.g.::

    [{"op": "add_section"}, {"op": "create_item", "x": 100, "y": 100}]
"""

from pathlib import Path
from typing import Optional
import itertools
import json
import logging

import click

from .board import BoardSession, check_board_invariants
from .changeset import build_changeset, format_line, log_changeset, log_layout_state
from .config import DEFAULT_CONFIG, load_config
from .oplog import OpLog
from .sections import compute_layout
from .snapshot import read_snapshot, write_snapshot
from .types import BoardState

logger = logging.getLogger("noteboard")


def _setup_logging(verbose: bool) -> None:
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # rebind to the current stderr on every invocation
    for old in list(logger.handlers):
        logger.removeHandler(old)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)


def _load_layout(path: Path):
    try:
        return read_snapshot(path)
    except ValueError as e:
        raise click.ClickException(str(e))


@click.group()
def cli() -> None:
    """Board layout and placement engine."""


@cli.command()
@click.argument("count", type=int)
@click.option("--width", type=float, default=1000, show_default=True)
@click.option("--height", type=float, default=800, show_default=True)
def layout(count: int, width: float, height: float) -> None:
    """Print the section layout for COUNT sections."""
    for section in compute_layout(count, width, height):
        click.echo(
            format_line(
                "SEC",
                {
                    "id": section.id,
                    "x": section.x,
                    "y": section.y,
                    "w": section.width,
                    "h": section.height,
                },
            )
        )


@cli.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--board",
    "board_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Board snapshot to start from (default: a new one-section board).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file overriding engine settings.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the resulting board snapshot here.",
)
@click.option("--width", type=float, default=1000, show_default=True)
@click.option("--height", type=float, default=800, show_default=True)
@click.option("--oplog", "show_oplog", is_flag=True, help="Print the operation log.")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging.")
def replay(
    script: Path,
    board_path: Optional[Path],
    config_path: Optional[Path],
    output: Optional[Path],
    width: float,
    height: float,
    show_oplog: bool,
    verbose: bool,
) -> None:
    """Apply the transitions in SCRIPT and print what changed."""
    _setup_logging(verbose)

    config = DEFAULT_CONFIG
    if config_path is not None:
        try:
            config = load_config(config_path)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--config")

    try:
        requests = json.loads(script.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {script}: {e}")
    if not isinstance(requests, list):
        raise click.ClickException(f"{script} must contain a JSON list of requests")

    oplog = OpLog()
    # each clock reading lies past the debounce window of the previous one
    ticks = itertools.count()
    clock = lambda: next(ticks) * (config.debounce_seconds + 1.0)

    if board_path is not None:
        session = BoardSession(
            BoardState(layout=_load_layout(board_path)),
            config=config,
            clock=clock,
            oplog=oplog,
        )
    else:
        session = BoardSession.new(
            width, height, config=config, clock=clock, oplog=oplog
        )

    initial = session.state.layout
    if verbose:
        log_layout_state("BEFORE", initial, logger)
    rejected = 0
    for index, request in enumerate(requests):
        try:
            result = session.apply_request(request)
        except ValueError as e:
            raise click.ClickException(f"Request {index}: {e}")
        if not result.applied and result.reason:
            rejected += 1

    if verbose:
        log_layout_state("AFTER", session.state.layout, logger)
    changeset = build_changeset(initial, session.state.layout)
    log_changeset(changeset, logger)
    click.echo(changeset.to_plaintext(), nl=False)
    if show_oplog:
        click.echo(oplog.to_plaintext(), nl=False)

    logger.info(
        f"Applied {session.transition_count} of {len(requests)} requests "
        f"({rejected} rejected)"
    )

    if output is not None:
        write_snapshot(output, session.state.layout)


@cli.command()
@click.argument("board_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(board_path: Path) -> None:
    """Report invariant violations in a board snapshot."""
    layout_state = _load_layout(board_path)
    diagnostics = []
    check_board_invariants(BoardState(layout=layout_state), diagnostics)
    for d in diagnostics:
        click.echo(f"[{d['severity'].upper()}] {d['kind']}: {d['body']}")
    if diagnostics:
        raise SystemExit(1)
    click.echo(
        f"OK: {layout_state.section_count} sections, {len(layout_state.items)} items"
    )


if __name__ == "__main__":
    cli()
