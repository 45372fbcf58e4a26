"""Filesystem-backed message source for the OpenCode storage directory."""

from __future__ import annotations

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Literal, Optional, Set

from pydantic import ValidationError

from opencode_stats.core.config import StatsConfig
from opencode_stats.domain.exceptions import MessageLoadError
from opencode_stats.domain.interfaces import MessageVisitor
from opencode_stats.domain.models import Message, TokenUsage

logger = logging.getLogger(__name__)


class StoredMessage(Message):
    """On-disk assistant message; unlike :class:`Message`, tokens are required."""

    role: Literal["assistant"]
    tokens: TokenUsage


def iter_json_files(directory: Path) -> Iterator[Path]:
    """Yield ``*.json`` files below ``directory`` depth-first.

    Symbolic links are not followed. A missing directory yields nothing.
    """

    try:
        entries = list(os.scandir(directory))
    except FileNotFoundError:
        return
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            yield from iter_json_files(path)
        elif entry.is_file(follow_symlinks=False) and entry.name.endswith(".json"):
            yield path


def parse_message_file(path: Path) -> Optional[Message]:
    """Return the validated message in ``path`` or ``None`` to skip it."""

    try:
        text = path.read_text(encoding="utf-8")
        json.loads(text)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.warning(
            "skipped unreadable message file: %s (%s)", path, exc
        )
        return None

    try:
        # Strict mode: numeric fields must be JSON numbers, not strings or booleans.
        return StoredMessage.model_validate_json(text, strict=True)
    except ValidationError:
        return None


class MessageLoader:
    """Reads, validates and de-duplicates messages from ``<data_dir>/message``.

    Each batch of files is read on a thread pool; parsed messages are then
    handed to the visitor one at a time on the calling thread.
    """

    def __init__(self, config: StatsConfig | None = None) -> None:
        self._config = config or StatsConfig()

    @property
    def config(self) -> StatsConfig:
        return self._config

    def for_each_message(self, visitor: MessageVisitor) -> None:
        message_dir = self._config.message_dir
        seen_ids: Set[str] = set()
        batch: List[Path] = []

        try:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
                for path in iter_json_files(message_dir):
                    batch.append(path)
                    if len(batch) < self._config.batch_size:
                        continue
                    self._process_batch(pool, batch, seen_ids, visitor)
                    batch = []

                if batch:
                    self._process_batch(pool, batch, seen_ids, visitor)
        except OSError as exc:
            raise MessageLoadError(
                f"Failed to scan OpenCode message files in {self._config.data_dir}: {exc}",
                context={"message_dir": str(message_dir)},
            ) from exc

    @staticmethod
    def _process_batch(
        pool: ThreadPoolExecutor,
        batch: List[Path],
        seen_ids: Set[str],
        visitor: MessageVisitor,
    ) -> None:
        logger.debug("loading_batch", extra={"files": len(batch)})
        for message in pool.map(parse_message_file, batch):
            if message is None or message.id in seen_ids:
                continue
            seen_ids.add(message.id)
            visitor(message)
