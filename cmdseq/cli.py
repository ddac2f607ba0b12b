"""CLI entry point for cmdseq.

Usage:
    cmdseq [-d DIR] COUNT1 CMD1 [COUNT2 CMD2 ...]

Each invocation runs exactly one command. Commands are selected in order,
command N being picked COUNTN times in a row before moving on; after the
last command the cycle starts again. Meant to be called from cron or a
similar scheduler.

Example:
    # backup twice, then prune once, then repeat
    cmdseq -d /var/lib/cmdseq 2 "restic backup /home" 1 "restic forget --prune"
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cmdseq import __version__
from cmdseq.core.config import load_config
from cmdseq.core.driver import InvocationDriver
from cmdseq.core.errors import CmdseqError, ScheduleError
from cmdseq.core.executor import ShellExecutor
from cmdseq.core.models import Schedule

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_HELP = 255

# Flags that change how one invocation behaves but not which cycle it belongs to
IDENTITY_NEUTRAL_FLAGS = frozenset({"--dry-run", "-v", "--verbose"})

console = Console()
err_console = Console(stderr=True)


def identity_args(raw_args: Sequence[str]) -> list[str]:
    """Arguments that make up the schedule identity.

    Everything typed on the command line counts, except identity-neutral
    flags appearing before a ``--`` separator.
    """
    args: list[str] = []
    options_done = False
    for arg in raw_args:
        if arg == "--":
            options_done = True
        if not options_done and arg in IDENTITY_NEUTRAL_FLAGS:
            continue
        args.append(arg)
    return args


def _setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _show_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    ctx.exit(EXIT_HELP)


class _RawArgsCommand(click.Command):
    """Command that keeps the unparsed argument vector for fingerprinting."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta["cmdseq.raw_args"] = list(args)
        return super().parse_args(ctx, args)


@click.command(
    cls=_RawArgsCommand,
    context_settings={"help_option_names": []},
)
@click.option(
    "-h",
    "--help",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_show_help,
    help="Show this message and exit.",
)
@click.option(
    "-d",
    "--dir",
    "state_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding state files (default: system temp directory)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file (default: $CMDSEQ_CONFIG)",
)
@click.option("--dry-run", is_flag=True, help="Show the next command without running it")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
@click.argument("pairs", nargs=-1)
@click.pass_context
def main(
    ctx: click.Context,
    state_dir: Path | None,
    config_path: Path | None,
    dry_run: bool,
    verbose: bool,
    pairs: tuple[str, ...],
) -> None:
    """Run the next command of a repeating schedule.

    PAIRS are COUNT COMMAND pairs: COMMAND is run COUNT times (one per
    invocation) before moving on to the next pair.
    """
    try:
        schedule = Schedule.from_pairs(pairs)
    except ScheduleError as e:
        raise click.UsageError(str(e), ctx=ctx) from e

    try:
        config = load_config(
            config_path,
            overrides={
                "state_dir": state_dir,
                "log_level": "DEBUG" if verbose else None,
            },
        )
        _setup_logging(config.log_level_value)

        driver = InvocationDriver(
            schedule,
            identity_args(ctx.meta.get("cmdseq.raw_args", [])),
            config.state_dir,
            executor=ShellExecutor(config.shell),
        )

        if dry_run:
            outcome = driver.peek()
            console.print(
                f"[bold]Next command[/bold] ({outcome.command_index + 1}/"
                f"{len(schedule.commands)}): {escape(outcome.command)}",
                soft_wrap=True,
            )
            console.print(
                f"[dim]Position {outcome.position} -> {outcome.next_position} "
                f"(cycle length {schedule.length})[/dim]",
                soft_wrap=True,
            )
            return

        driver.run()

    except CmdseqError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
