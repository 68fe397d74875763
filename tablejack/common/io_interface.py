"""
This module contains the IOInterface abstract base class and its implementations.

Adapters read lines and write text through an IOInterface, which keeps the
terminal, scripted test input and transcript files interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

import aiofiles


class IOInterface(ABC):
    """
    Abstract base class for an IO interface.

    This class defines the interface for line-based input/output in the game.
    """

    @abstractmethod
    def output(self, message: str) -> None:
        """Output a message to the interface."""
        pass

    @abstractmethod
    def input(self, prompt: str) -> str:
        """
        Get input from the user with a prompt.

        Raises EOFError when no more input is available.
        """
        pass

    async def output_async(self, message: str) -> None:
        """Async version of output; interfaces backed by files override it."""
        self.output(message)

    async def input_async(self, prompt: str) -> str:
        """Async version of input; interfaces backed by files override it."""
        return self.input(prompt)


class DummyIOInterface(IOInterface):
    """
    A dummy IO interface for simulation purposes. Does not perform any actual IO.
    """

    def output(self, message: str) -> None:
        """Simulates output operation."""
        pass

    def input(self, prompt: str) -> str:
        """Simulates input operation."""
        return ""


class TestIOInterface(IOInterface):
    """
    A test IO interface. Collects output messages and replays scripted input.

    Once the scripted responses run out, ``input`` raises EOFError the same
    way a closed terminal does.
    """

    __test__ = False

    def __init__(self, responses: Optional[List[str]] = None):
        self.sent_messages: List[str] = []
        self.prompts: List[str] = []
        self.input_responses: List[str] = list(responses or [])

    def output(self, message: str) -> None:
        self.sent_messages.append(message)

    def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.input_responses:
            return self.input_responses.pop(0)
        raise EOFError("No more scripted input")

    def add_response(self, response: str) -> None:
        """Queue a line of input."""
        self.input_responses.append(response)

    @property
    def transcript(self) -> str:
        return "\n".join(self.sent_messages)


class ConsoleIOInterface(IOInterface):
    """
    A console IO interface for interactive gameplay.
    """

    def output(self, message: str) -> None:
        print(message)

    def input(self, prompt: str) -> str:
        return input(prompt)


class LoggingIOInterface(IOInterface):
    """
    A logging IO interface that records a transcript of the session.

    Every message and every answered prompt is appended to ``log_file_path``.
    When ``inner`` is given, IO is passed through to it, so the player still
    sees the game; otherwise input is unavailable and the interface only
    records.
    """

    def __init__(self, log_file_path: str, inner: Optional[IOInterface] = None):
        self.log_file_path = log_file_path
        self.inner = inner

    def _require_inner(self) -> IOInterface:
        if self.inner is None:
            raise EOFError("Transcript-only interface cannot read input")
        return self.inner

    def _append(self, line: str) -> None:
        with open(self.log_file_path, "a", encoding="utf-8") as log_file:
            log_file.write(line + "\n")

    async def _append_async(self, line: str) -> None:
        async with aiofiles.open(
            self.log_file_path, mode="a", encoding="utf-8"
        ) as log_file:
            await log_file.write(line + "\n")

    def output(self, message: str) -> None:
        """Write an output message to the log file."""
        if self.inner is not None:
            self.inner.output(message)
        self._append(message)

    def input(self, prompt: str) -> str:
        """Read from the wrapped interface and record the answer."""
        response = self._require_inner().input(prompt)
        self._append(f"{prompt}{response}")
        return response

    async def output_async(self, message: str) -> None:
        """Async version of output."""
        if self.inner is not None:
            await self.inner.output_async(message)
        await self._append_async(message)

    async def input_async(self, prompt: str) -> str:
        """Async version of input; the answer is recorded like any output."""
        response = await self._require_inner().input_async(prompt)
        await self._append_async(f"{prompt}{response}")
        return response
