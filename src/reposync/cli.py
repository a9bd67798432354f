"""sync-repos CLI - bring a directory of git working copies up to date."""

import sys
from pathlib import Path
from typing import List, Optional

import click
import typer

from .config import SOURCE_DEFAULT, SyncConfig
from .orchestrator import BatchOrchestrator
from .output import error, muted, plain, warning
from .utils import get_version, setup_logging

app = typer.Typer(
    name="sync-repos",
    help="Sync every git repository below the current directory with its upstream.",
    add_completion=False,
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"sync-repos version {get_version()}")
        raise typer.Exit()


def _print_sources(config: SyncConfig) -> None:
    if config.global_path:
        plain(f"🌍 Loaded global configuration from {config.global_path}")
    if config.directory_path:
        plain(f"📁 Loaded directory configuration from {config.directory_path}")
    if not config.loaded_any:
        plain("📄 No configuration files found, using built-in defaults")
    for message in config.warnings:
        warning(message, prefix="⚠️ ")

    plain("⚙️  Configuration sources:")
    plain(
        f"   Source remote: {config.get('source_remote')} "
        f"({config.source_of('source_remote')})"
    )
    target = config.get("target_remote")
    if target:
        plain(f"   Target remote: {target} ({config.source_of('target_remote')})")
    else:
        plain(f"   Target remote: none ({SOURCE_DEFAULT})")
    plain(
        f"   Main branch: {config.get('main_branch')} "
        f"({config.source_of('main_branch')})"
    )
    plain(
        f"   Verbose mode: {str(bool(config.get('verbose'))).lower()} "
        f"({config.source_of('verbose')})"
    )


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def sync(
    directory: Optional[str] = typer.Argument(
        None, help="Process only this directory"
    ),
    source_remote: Optional[str] = typer.Option(
        None, "--source-remote", "-s", help="Source remote name (default: origin)"
    ),
    target_remote: Optional[str] = typer.Option(
        None, "--target-remote", "-t", help="Target remote name for push (optional)"
    ),
    main_branch: Optional[str] = typer.Option(
        None, "--main-branch", "-b", help="Main branch name (default: main)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show detailed output and interactive prompts"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Synchronize git repositories with their source remote.

    Every immediate subdirectory that is a git working copy is fetched and
    merge-pulled from SOURCE/MAIN, optionally pushed to TARGET, and returned
    to the branch it was on.

    Settings are read from ~/.sync_repos.yml, then sync_repos.yml in the
    current directory, then the command line.

    Examples:
        sync-repos                          # all repositories, config/defaults
        sync-repos my-project               # only my-project
        sync-repos -v                       # verbose with interactive prompts
        sync-repos -s upstream -t fork      # pull upstream, mirror to fork
    """
    config = SyncConfig().load()
    config.override(
        source_remote=source_remote,
        target_remote=target_remote,
        main_branch=main_branch,
        verbose=verbose,
    )
    params = config.parameters()
    setup_logging(verbose=params.verbose)

    _print_sources(config)

    base_dir = Path.cwd()
    if directory is not None:
        target_path = Path(directory)
        if not target_path.is_absolute():
            target_path = base_dir / target_path
        if not target_path.is_dir():
            error(f"Directory '{directory}' not found", prefix="❌")
            raise typer.Exit(1)

    BatchOrchestrator(params, base_dir=base_dir).run(target=directory)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the sync-repos console script.

    Usage errors exit with status 1 rather than click's default of 2.
    """
    try:
        code = app(args=argv, prog_name="sync-repos", standalone_mode=False)
    except click.UsageError as e:
        e.show()
        muted("Use -h or --help for usage information")
        return 1
    except click.Abort:
        plain("\nAborted.")
        return 1
    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
