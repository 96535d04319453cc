#!/usr/bin/env python3
"""Activity log collection with write-through persistence."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from kv_runtime import KeyValueStore
from log_contract import validate_log_collection
from tag_catalog import Language
from tagger import DEFAULT_TAGGER, Tagger
from text_normalize import fold, normalize


logger = logging.getLogger(__name__)

STORAGE_KEY = "activity_logs_v1"

# Timestamps written by the mobile app count seconds from this instant.
REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class LogEntry:
    id: str
    text: str
    created_at: datetime
    tag_ids: tuple[str, ...]

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "createdAt": self.created_at.isoformat(),
            "tagIDs": list(self.tag_ids),
        }


def _new_id() -> str:
    if hasattr(uuid, "uuid7"):
        return str(uuid.uuid7())  # type: ignore[attr-defined]
    return str(uuid.uuid4())


def local_now() -> datetime:
    return datetime.now().astimezone()


def as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_created_at(value: Any) -> datetime:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (REFERENCE_EPOCH + timedelta(seconds=float(value))).astimezone()
    if isinstance(value, str):
        return as_aware(datetime.fromisoformat(value))
    raise ValueError(f"unsupported createdAt value: {value!r}")


def encode_logs(entries: Iterable[LogEntry]) -> bytes:
    payload = [entry.to_payload() for entry in entries]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_logs(data: bytes) -> list[LogEntry]:
    payload = json.loads(data.decode("utf-8"))
    validate_log_collection(payload)
    return [
        LogEntry(
            id=item["id"],
            text=item["text"],
            created_at=parse_created_at(item["createdAt"]),
            tag_ids=tuple(dict.fromkeys(item["tagIDs"])),
        )
        for item in payload
    ]


def reconcile_tags_from_text(entries: Iterable[LogEntry], tagger: Tagger) -> list[LogEntry]:
    """Recompute every entry's tags from its text alone.

    Custom tags and catalog tags that no longer match the text are dropped;
    derivable tags that were removed by hand come back.
    """
    return [replace(entry, tag_ids=tuple(tagger.extract_tag_ids(entry.text))) for entry in entries]


def _sorted_by_name(tagger: Tagger, tag_ids: Iterable[str], language: Language) -> list[str]:
    def sort_key(tag_id: str) -> tuple[str, str]:
        name = tagger.tag_name(tag_id, language) or tag_id
        return (fold(name), tag_id)

    return sorted(tag_ids, key=sort_key)


class LogStore:
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        tagger: Tagger | None = None,
        clock: Clock | None = None,
        reconcile_on_load: bool = True,
    ) -> None:
        self.kv = kv
        self.tagger = tagger or DEFAULT_TAGGER
        self.clock = clock or local_now
        self.reconcile_on_load = reconcile_on_load
        self._logs: list[LogEntry] = []
        self.load()

    @property
    def logs(self) -> list[LogEntry]:
        return list(self._logs)

    @property
    def sorted_logs(self) -> list[LogEntry]:
        return sorted(self._logs, key=lambda entry: entry.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._logs)

    def log(self, log_id: str) -> LogEntry | None:
        for entry in self._logs:
            if entry.id == log_id:
                return entry
        return None

    def _index(self, log_id: str) -> int | None:
        for idx, entry in enumerate(self._logs):
            if entry.id == log_id:
                return idx
        return None

    def add_log(self, text: str) -> LogEntry | None:
        trimmed = text.strip()
        if not trimmed:
            return None

        entry = LogEntry(
            id=_new_id(),
            text=trimmed,
            created_at=as_aware(self.clock()),
            tag_ids=tuple(self.tagger.extract_tag_ids(trimmed)),
        )
        self._logs.append(entry)
        self.save()
        return entry

    def delete_log(self, log_id: str) -> None:
        self._logs = [entry for entry in self._logs if entry.id != log_id]
        self.save()

    def add_tag(self, tag_id: str, log_id: str) -> None:
        normalized_tag = normalize(tag_id)
        if not normalized_tag:
            return
        idx = self._index(log_id)
        if idx is None:
            return

        current = self._logs[idx]
        if normalized_tag in current.tag_ids:
            return
        self._logs[idx] = replace(current, tag_ids=current.tag_ids + (normalized_tag,))
        self.save()

    def remove_tag(self, tag_id: str, log_id: str) -> None:
        idx = self._index(log_id)
        if idx is None:
            return
        normalized_tag = normalize(tag_id)
        current = self._logs[idx]
        self._logs[idx] = replace(
            current,
            tag_ids=tuple(t for t in current.tag_ids if t != normalized_tag),
        )
        self.save()

    def update_log_date(self, log_id: str, new_date: datetime) -> None:
        idx = self._index(log_id)
        if idx is None:
            return
        self._logs[idx] = replace(self._logs[idx], created_at=as_aware(new_date))
        self.save()

    def logs_with_tag(self, tag_id: str) -> list[LogEntry]:
        return [entry for entry in self.sorted_logs if tag_id in entry.tag_ids]

    def tag_name(self, tag_id: str, language: Language) -> str | None:
        return self.tagger.tag_name(tag_id, language)

    def localized_tags(self, entry: LogEntry, language: Language) -> list[str]:
        names = (self.tag_name(tag_id, language) for tag_id in entry.tag_ids)
        return [name for name in names if name is not None]

    def available_tag_ids(self, language: Language) -> list[str]:
        in_use = {tag_id for entry in self._logs for tag_id in entry.tag_ids}
        return _sorted_by_name(self.tagger, in_use, language)

    def all_suggested_tag_ids(self, language: Language) -> list[str]:
        return _sorted_by_name(self.tagger, (d.id for d in self.tagger.catalog), language)

    def suggested_tag_ids_for(self, log_id: str, language: Language) -> list[str]:
        entry = self.log(log_id)
        current = set(entry.tag_ids) if entry else set()
        return [tag_id for tag_id in self.all_suggested_tag_ids(language) if tag_id not in current]

    def save(self) -> None:
        self.kv.set(STORAGE_KEY, encode_logs(self._logs))

    def load(self) -> None:
        data = self.kv.get(STORAGE_KEY)
        if data is None:
            self._logs = []
            return

        try:
            decoded = decode_logs(data)
        except (ValueError, KeyError, TypeError, OverflowError, UnicodeDecodeError) as exc:
            logger.warning("discarding unreadable persisted logs: %s", exc)
            self._logs = []
            self.save()
            return

        if self.reconcile_on_load:
            decoded = reconcile_tags_from_text(decoded, self.tagger)
        self._logs = decoded
        self.save()
