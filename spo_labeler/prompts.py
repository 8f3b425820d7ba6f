"""Operator decision points.

The workflow never calls `input()` directly; it asks a `Prompter`. The console
implementation blocks on stdin and copies the exchange into the log, so the
run transcript shows what the operator saw and answered.
"""
import logging
from typing import Callable

logger = logging.getLogger(__name__)

YES_ANSWERS = ("y", "yes")


def is_yes(answer: str) -> bool:
    return (answer or "").strip().lower() in YES_ANSWERS


class Prompter:
    def confirm(self, question: str) -> bool:
        raise NotImplementedError

    def ask(self, question: str) -> str:
        raise NotImplementedError

    def show(self, message: str) -> None:
        raise NotImplementedError


class ConsolePrompter(Prompter):
    def __init__(self, read: Callable[[str], str] = input, write: Callable[[str], None] = print):
        self._read = read
        self._write = write

    def confirm(self, question: str) -> bool:
        return is_yes(self.ask(f"{question} (y/n)"))

    def ask(self, question: str) -> str:
        logger.debug("Prompt: %s", question)
        try:
            answer = self._read(f"{question}: ")
        except EOFError:
            # Closed stdin reads as the default empty answer.
            answer = ""
        logger.debug("Answer: %r", answer)
        return answer

    def show(self, message: str) -> None:
        logger.debug("Shown: %s", message)
        self._write(message)
