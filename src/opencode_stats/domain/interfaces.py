"""Contracts between the aggregation core and its collaborators."""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar

from .models import Message

ResultT = TypeVar("ResultT", covariant=True)

MessageVisitor = Callable[[Message], None]


class MessageAccumulator(Protocol[ResultT]):
    """Folds a stream of messages into running totals."""

    def consume(self, message: Message) -> None:
        """Fold one message in, or ignore it when it fails the match test."""

    def result(self) -> ResultT:
        """Return an immutable snapshot of everything consumed so far."""


class MessageSource(Protocol):
    """Supplies already-validated messages to a visitor, one at a time."""

    def for_each_message(self, visitor: MessageVisitor) -> None:
        """Invoke ``visitor`` once per unique message."""
