"""Console output helpers.

All operator-facing text goes through ``typer.echo``; colour is added with
``typer.style`` and stripped automatically when stdout is not a terminal.
"""

import typer


def plain(message: str = "") -> None:
    typer.echo(message)


def muted(message: str) -> None:
    typer.echo(typer.style(message, dim=True))


def header(title: str, width: int = 60) -> None:
    typer.echo("=" * width)
    typer.echo(typer.style(title, bold=True))
    typer.echo("=" * width)


def success(message: str, prefix: str = "   ✅") -> None:
    typer.echo(typer.style(f"{prefix} {message}", fg=typer.colors.GREEN))


def warning(message: str, prefix: str = "   ⚠️ ") -> None:
    typer.echo(typer.style(f"{prefix} {message}", fg=typer.colors.YELLOW))


def error(message: str, prefix: str = "   ❌") -> None:
    typer.echo(typer.style(f"{prefix} {message}", fg=typer.colors.RED))


def step(message: str, prefix: str = "   ") -> None:
    """Print an indented progress line for verbose mode."""
    typer.echo(f"{prefix}{message}")
