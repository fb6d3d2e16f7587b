"""Colourised console output and interactive prompts."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.theme import Theme

theme = Theme(
    {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "header": "bold cyan",
        "prompt": "bold cyan",
        "command": "blue",
    }
)
console = Console(theme=theme, highlight=False)

HEADER_RULE = "═" * 47


def print_info(message: str) -> None:
    console.print(f"[info]ℹ[/info] {escape(message)}")


def print_success(message: str) -> None:
    console.print(f"[success]✓[/success] {escape(message)}")


def print_warning(message: str) -> None:
    console.print(f"[warning]⚠[/warning] {escape(message)}")


def print_error(message: str) -> None:
    console.print(f"[error]✗[/error] {escape(message)}")


def print_header(title: str) -> None:
    console.print()
    console.print(f"[header]{HEADER_RULE}[/header]")
    console.print(f"[header]  {escape(title)}[/header]")
    console.print(f"[header]{HEADER_RULE}[/header]")
    console.print()


def print_command(command_line: str) -> None:
    console.print(f"\n[bold cyan]Running:[/bold cyan] [command]{escape(command_line)}[/command]")


def print_plain(message: str = "") -> None:
    console.print(escape(message))


def is_yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


class BasePrompter(ABC):
    """Source of answers for interactive questions."""

    @abstractmethod
    def ask(self, prompt: str, default: str = "") -> str:
        """Ask a free-form question; an empty answer yields ``default``."""

    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Ask a yes/no question; only ``y``/``yes`` count as yes."""
        hint = "(Y/n)" if default else "(y/N)"
        answer = self.ask(f"{prompt} {hint}")
        if not answer.strip():
            return default
        return is_yes(answer)

    def choose(self, prompt: str, choices: list[str], default: str) -> str:
        """Ask for one of ``choices``; anything else is returned as typed."""
        answer = self.ask(f"{prompt} [{default}]")
        return answer.strip() or default


class ConsolePrompter(BasePrompter):
    """Prompter reading from the controlling terminal.

    When stdin is not a terminal (the tool was piped into an interpreter) the
    answers are read from ``/dev/tty`` instead.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._tty: TextIO | None = None

    def _input_stream(self) -> TextIO | None:
        if self._stream is not None:
            return self._stream
        if sys.stdin is not None and sys.stdin.isatty():
            return None
        if self._tty is None:
            try:
                self._tty = open("/dev/tty")
            except OSError:
                return None
        return self._tty

    def ask(self, prompt: str, default: str = "") -> str:
        answer = Prompt.ask(
            f"[prompt]{escape(prompt)}[/prompt]",
            console=console,
            default=default,
            show_default=False,
            stream=self._input_stream(),
        )
        return answer or ""

    def close(self) -> None:
        if self._tty is not None:
            self._tty.close()
            self._tty = None
