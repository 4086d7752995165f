#!/usr/bin/env python3
"""
agent-environment Console Output
Leveled, colorized status lines on stderr (info / ok / warn / error)
"""

from rich.console import Console
from rich.markup import escape

# Status goes to stderr so stdout stays clean for `agentenv env` and friends.
# Long paths stay on one line; rich drops colors when stderr is not a terminal.
console = Console(stderr=True, highlight=False, soft_wrap=True)

_verbose = False


def set_verbose(enabled: bool):
    """Enable or disable debug lines"""
    global _verbose
    _verbose = enabled


def info(message: str):
    console.print(f"[blue]\\[info][/blue]  {escape(message)}")


def ok(message: str):
    console.print(f"[green]\\[ok][/green]    {escape(message)}")


def warn(message: str):
    console.print(f"[yellow]\\[warn][/yellow]  {escape(message)}")


def error(message: str):
    console.print(f"[red]\\[error][/red] {escape(message)}")


def debug(message: str):
    if _verbose:
        console.print(f"[dim]\\[debug] {escape(message)}[/dim]")


def blank():
    console.print()
