"""Interactive prompts used while reconciling credentials.

Two questions can be asked during a build: which credential source to use
when local and remote credentials differ, and whether new credentials should
be generated when none exist. ``ClickPrompter`` asks on the terminal;
``NonInteractivePrompter`` fails with a descriptive error so CI runs never
hang waiting for input.
"""

import asyncio
from collections.abc import Sequence
from typing import Protocol

import click
import structlog

from eas_build.exceptions import PromptError

log = structlog.get_logger(__name__)

Choice = tuple[str, str]
"""(title, value) pair offered by a select prompt."""


class Prompter(Protocol):
    """Interactive prompt collaborator."""

    async def select(self, message: str, choices: Sequence[Choice]) -> str:
        """Ask the user to pick one of ``choices`` and return its value."""
        ...

    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question."""
        ...


class ClickPrompter:
    """Terminal prompter built on click.

    Prompts run in a worker thread so other platform pipelines keep running,
    and a lock keeps questions from concurrent pipelines from interleaving.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def select(self, message: str, choices: Sequence[Choice]) -> str:
        if not choices:
            raise ValueError("select prompt needs at least one choice")

        lines = [message]
        lines.extend(f"  {index}. {title}" for index, (title, _) in enumerate(choices, start=1))
        numbers = [str(index) for index in range(1, len(choices) + 1)]

        async with self._lock:
            answer = await asyncio.to_thread(
                click.prompt,
                "\n".join(lines) + "\nSelect",
                type=click.Choice(numbers),
                default="1",
            )
        return choices[int(answer) - 1][1]

    async def confirm(self, message: str) -> bool:
        async with self._lock:
            return await asyncio.to_thread(click.confirm, message, default=False)


class NonInteractivePrompter:
    """Prompter for non-interactive runs: every question is an error."""

    async def select(self, message: str, choices: Sequence[Choice]) -> str:
        options = ", ".join(value for _, value in choices)
        log.error("prompt_in_non_interactive_mode", prompt=message)
        raise PromptError(
            f"Input is required but running in non-interactive mode: {message} (options: {options}). "
            "Set credentialsSource in eas.json to choose explicitly."
        )

    async def confirm(self, message: str) -> bool:
        log.error("prompt_in_non_interactive_mode", prompt=message)
        raise PromptError(f"Input is required but running in non-interactive mode: {message}")


def create_prompter(non_interactive: bool) -> Prompter:
    return NonInteractivePrompter() if non_interactive else ClickPrompter()
