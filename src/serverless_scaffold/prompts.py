"""Interactive prompts shared by both CLIs, built on ``rich.prompt``."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import TypeVar

from rich.prompt import Confirm, Prompt

from serverless_scaffold.utils import console

E = TypeVar("E", bound=Enum)


def ask_text(
    question: str,
    default: str | None = None,
    validate: Callable[[str], str | None] | None = None,
) -> str:
    """Ask for free text, re-asking until *validate* returns no error."""
    while True:
        answer = Prompt.ask(question, default=default, console=console) or ""
        answer = answer.strip()
        error = validate(answer) if validate else None
        if error is None:
            return answer
        console.print(f"[red]{error}[/red]")


def ask_confirm(question: str, default: bool = True) -> bool:
    return Confirm.ask(question, default=default, console=console)


def _print_menu(options: list[E]) -> None:
    for index, option in enumerate(options, start=1):
        console.print(
            f"  [cyan]{index}[/cyan]. [bold]{option.value}[/bold]"
            f" [dim]- {getattr(option, 'description', option.value)}[/dim]"
        )


def _resolve(options: list[E], token: str) -> E | None:
    token = token.strip().lower()
    if token.isdigit() and 1 <= int(token) <= len(options):
        return options[int(token) - 1]
    for option in options:
        if option.value == token:
            return option
    return None


def ask_choice(question: str, options: Iterable[E], default: E) -> E:
    """Show a numbered menu and return the picked member.

    The user may answer with the number or the value itself.
    """
    choices = list(options)
    console.print(f"[bold]{question}[/bold]")
    _print_menu(choices)
    while True:
        answer = Prompt.ask("Select", default=default.value, console=console)
        picked = _resolve(choices, answer)
        if picked is not None:
            return picked
        console.print(f"[red]Please pick 1-{len(choices)} or one of the listed names.[/red]")


def ask_multi_choice(question: str, options: Iterable[E], defaults: Iterable[E]) -> list[E]:
    """Show a numbered menu and return every member picked.

    Answers are comma-separated numbers or values; an empty answer keeps
    *defaults*.
    """
    choices = list(options)
    default_text = ",".join(d.value for d in defaults)
    console.print(f"[bold]{question}[/bold] [dim](comma-separated)[/dim]")
    _print_menu(choices)
    while True:
        answer = Prompt.ask("Select", default=default_text, console=console)
        tokens = [t for t in answer.split(",") if t.strip()]
        picked = [_resolve(choices, t) for t in tokens]
        if all(p is not None for p in picked):
            unique: list[E] = []
            for p in picked:
                if p not in unique:
                    unique.append(p)
            return unique
        console.print(f"[red]Please pick from 1-{len(choices)} or the listed names.[/red]")
