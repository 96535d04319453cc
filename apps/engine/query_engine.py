#!/usr/bin/env python3
"""
Answer natural-language questions about the activity logs.

A question is reduced to a date filter, a tag filter and an intent. Intents
are tried in a fixed order and the first one that applies produces the
answer:

  list trees > count trees > count plants > how many times > yes/no > latest
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from answer_templates import format_date, render
from log_store import Clock, LogEntry, LogStore, as_aware, local_now
from query_dates import DateRange, extract_date_range, extract_year, has_phrase, positive_int
from query_lexicon import (
    HOW_MANY_PHRASES,
    HOW_MANY_TIMES_PHRASES,
    LAST_TIME_PHRASES,
    PLANT_WORDS,
    SPECIES_CONNECTORS,
    TREE_WORDS,
    WHICH_TREES_PHRASES,
)
from tag_catalog import TREE_SPECIES_IDS, TREE_TAG_ID, Language
from tagger import Tagger
from text_normalize import normalize, tokens


logger = logging.getLogger(__name__)

# Words allowed between a tree word and "of"/"de" in "tree ... of <species>".
MAX_SPECIES_GAP = 3


@dataclass(frozen=True)
class ParsedQuestion:
    normalized: str
    tag_ids: tuple[str, ...]
    year: int | None
    date_range: DateRange | None

    @property
    def words(self) -> set[str]:
        return set(self.normalized.split(" "))


@dataclass(frozen=True)
class Partition:
    period_logs: list[LogEntry]
    strict: list[LogEntry]
    soft: list[LogEntry]
    candidates: list[LogEntry]


def partition_logs(period_logs: list[LogEntry], query_tag_ids: Iterable[str]) -> Partition:
    wanted = set(query_tag_ids)
    strict = [entry for entry in period_logs if wanted.issubset(entry.tag_ids)]
    soft = [entry for entry in period_logs if wanted.intersection(entry.tag_ids)]

    if not wanted:
        candidates = list(period_logs)
    elif strict:
        candidates = strict
    elif soft:
        candidates = soft
    else:
        candidates = []
    return Partition(period_logs=period_logs, strict=strict, soft=soft, candidates=candidates)


def count_quantity(logs: Iterable[LogEntry], vocabulary: set[str]) -> int:
    """Sum explicit counts ("3 trees") per log, with every log worth at least one."""
    total = 0
    for entry in logs:
        words = tokens(entry.text)
        explicit = 0
        for idx, word in enumerate(words):
            if word not in vocabulary:
                continue
            previous = positive_int(words[idx - 1]) if idx > 0 else None
            explicit += previous if previous is not None else 1
        total += max(explicit, 1)
    return total


def is_tree_log(entry: LogEntry) -> bool:
    if TREE_TAG_ID in entry.tag_ids:
        return True
    if TREE_SPECIES_IDS.intersection(entry.tag_ids):
        return True
    return bool(TREE_WORDS.intersection(tokens(entry.text)))


class LogAssistant:
    def __init__(
        self,
        store: LogStore,
        *,
        tagger: Tagger | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.store = store
        self.tagger = tagger or store.tagger
        self.clock = clock or store.clock or local_now

    def parse(self, question: str, now: datetime | None = None) -> ParsedQuestion:
        now = as_aware(now or self.clock())
        normalized = normalize(question)
        year = extract_year(normalized, now)
        return ParsedQuestion(
            normalized=normalized,
            tag_ids=tuple(self.tagger.extract_tag_ids(question)),
            year=year,
            date_range=extract_date_range(normalized, now, year),
        )

    def species_in_text(self, text: str) -> list[str]:
        words = tokens(text)
        found: list[str] = []
        for idx, word in enumerate(words):
            if word not in TREE_WORDS:
                continue
            window_end = min(len(words) - 1, idx + 1 + MAX_SPECIES_GAP)
            for pos in range(idx + 1, window_end + 1):
                if words[pos] not in SPECIES_CONNECTORS or pos + 1 >= len(words):
                    continue
                species = self.tagger.species_for_word(words[pos + 1])
                if species and species not in found:
                    found.append(species)
                    break
        return found

    def tree_species_names(self, entries: Iterable[LogEntry], language: Language) -> list[str]:
        names: list[str] = []
        for entry in entries:
            species_ids = [t for t in entry.tag_ids if t in TREE_SPECIES_IDS]
            species_ids += self.species_in_text(entry.text)
            for species_id in species_ids:
                name = self.tagger.tag_name(species_id, language) or species_id
                if name not in names:
                    names.append(name)
        return names

    def _latest(self, scenario: str, entry: LogEntry, language: Language) -> str:
        tag_names = self.store.localized_tags(entry, language)
        suffix = render("tags_suffix", language, tags=", ".join(tag_names)) if tag_names else ""
        return render(
            scenario,
            language,
            date=format_date(entry.created_at, language),
            text=entry.text,
            tags=suffix,
        )

    def answer(self, question: str, language: Language) -> str:
        trimmed = question.strip()
        if not trimmed:
            return render("ask_prompt", language)
        if len(self.store) == 0:
            return render("no_logs_yet", language)

        parsed = self.parse(trimmed)
        logs = self.store.sorted_logs
        if parsed.date_range is not None:
            period_logs = [entry for entry in logs if parsed.date_range.contains(entry.created_at)]
        else:
            period_logs = logs

        if not period_logs:
            if parsed.year is not None:
                return render("no_logs_year", language, year=parsed.year)
            return render("no_logs_period", language)

        part = partition_logs(period_logs, parsed.tag_ids)
        candidates = part.candidates
        words = parsed.words
        asks_how_many = has_phrase(parsed.normalized, HOW_MANY_PHRASES)
        logger.debug(
            "question tags=%s year=%s range=%s candidates=%d",
            parsed.tag_ids,
            parsed.year,
            parsed.date_range,
            len(candidates),
        )

        if has_phrase(parsed.normalized, WHICH_TREES_PHRASES):
            tree_logs = [entry for entry in candidates if is_tree_log(entry)]
            names = self.tree_species_names(tree_logs, language)
            if not names:
                return render("trees_none", language)
            return render("trees_listed", language, names=", ".join(names))

        if words & TREE_WORDS and asks_how_many:
            tree_logs = [entry for entry in candidates if is_tree_log(entry)]
            total = count_quantity(tree_logs, TREE_WORDS)
            if total == 0:
                return render("trees_none", language)
            return render("tree_count", language, count=total)

        if words & PLANT_WORDS and asks_how_many:
            total = count_quantity(candidates, PLANT_WORDS)
            if total == 0:
                return render("plants_none", language)
            return render("plant_count", language, count=total)

        if has_phrase(parsed.normalized, HOW_MANY_TIMES_PHRASES):
            count = len(part.strict) if part.strict else len(part.soft)
            if count == 0:
                return render("occurrence_none", language)
            return render("occurrence_count", language, count=count)

        if "?" in trimmed:
            if not candidates:
                return render("yes_no_none", language)
            latest = candidates[0]
            return render(
                "yes_no_match",
                language,
                count=len(candidates),
                date=format_date(latest.created_at, language),
                text=latest.text,
            )

        if not candidates:
            return render("no_match", language)
        if parsed.tag_ids or has_phrase(parsed.normalized, LAST_TIME_PHRASES):
            return self._latest("last_time", candidates[0], language)
        return self._latest("most_recent", candidates[0], language)
