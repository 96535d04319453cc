#!/usr/bin/env python3
"""Bilingual answer templates for the log assistant."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from tag_catalog import LANGUAGES, Language


@dataclass(frozen=True)
class Plural:
    one: str
    other: str

    def pick(self, count: int) -> str:
        return self.one if count == 1 else self.other


Template = str | Plural

SCENARIOS: tuple[str, ...] = (
    "ask_prompt",
    "no_logs_yet",
    "no_logs_year",
    "no_logs_period",
    "trees_listed",
    "trees_none",
    "tree_count",
    "plant_count",
    "plants_none",
    "occurrence_count",
    "occurrence_none",
    "yes_no_none",
    "yes_no_match",
    "last_time",
    "most_recent",
    "no_match",
    "tags_suffix",
)

TEMPLATES: dict[tuple[str, Language], Template] = {
    ("ask_prompt", "en"): "Ask me something about your activity logs.",
    ("ask_prompt", "es"): "Hazme una pregunta sobre tus registros de actividad.",
    ("no_logs_yet", "en"): "You don't have any activity logs yet.",
    ("no_logs_yet", "es"): "Todavía no tienes registros de actividad.",
    ("no_logs_year", "en"): "I found no logs for {year}.",
    ("no_logs_year", "es"): "No encontré registros para {year}.",
    ("no_logs_period", "en"): "I found no logs for that period.",
    ("no_logs_period", "es"): "No encontré registros para ese periodo.",
    ("trees_listed", "en"): "Trees in your logs: {names}.",
    ("trees_listed", "es"): "Árboles en tus registros: {names}.",
    ("trees_none", "en"): "I found no trees in your logs.",
    ("trees_none", "es"): "No encontré árboles en tus registros.",
    ("tree_count", "en"): Plural(
        "Your logs mention 1 tree.",
        "Your logs mention {count} trees.",
    ),
    ("tree_count", "es"): Plural(
        "Tus registros mencionan 1 árbol.",
        "Tus registros mencionan {count} árboles.",
    ),
    ("plant_count", "en"): Plural(
        "Your logs mention 1 plant.",
        "Your logs mention {count} plants.",
    ),
    ("plant_count", "es"): Plural(
        "Tus registros mencionan 1 planta.",
        "Tus registros mencionan {count} plantas.",
    ),
    ("plants_none", "en"): "I found no plants in your logs.",
    ("plants_none", "es"): "No encontré plantas en tus registros.",
    ("occurrence_count", "en"): Plural(
        "It happened 1 time.",
        "It happened {count} times.",
    ),
    ("occurrence_count", "es"): Plural(
        "Ocurrió 1 vez.",
        "Ocurrió {count} veces.",
    ),
    ("occurrence_none", "en"): "I found no matching logs.",
    ("occurrence_none", "es"): "No encontré registros que coincidan.",
    ("yes_no_none", "en"): "No, no logs matched.",
    ("yes_no_none", "es"): "No, ningún registro coincide.",
    ("yes_no_match", "en"): Plural(
        'Yes, 1 log matched. Most recent: {date}: "{text}"',
        'Yes, {count} logs matched. Most recent: {date}: "{text}"',
    ),
    ("yes_no_match", "es"): Plural(
        'Sí, 1 registro coincide. El más reciente: {date}: "{text}"',
        'Sí, {count} registros coinciden. El más reciente: {date}: "{text}"',
    ),
    ("last_time", "en"): 'The last time was {date}: "{text}"{tags}',
    ("last_time", "es"): 'La última vez fue el {date}: "{text}"{tags}',
    ("most_recent", "en"): 'Most recent log, {date}: "{text}"{tags}',
    ("most_recent", "es"): 'Registro más reciente, {date}: "{text}"{tags}',
    ("no_match", "en"): "No log matches your question.",
    ("no_match", "es"): "Ningún registro coincide con tu pregunta.",
    ("tags_suffix", "en"): " Tags: {tags}.",
    ("tags_suffix", "es"): " Etiquetas: {tags}.",
}

MONTH_ABBREVIATIONS: dict[Language, tuple[str, ...]] = {
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    "es": ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"),
}


def missing_templates() -> list[tuple[str, Language]]:
    return [
        (scenario, language)
        for scenario in SCENARIOS
        for language in LANGUAGES
        if (scenario, language) not in TEMPLATES
    ]


def check_templates() -> None:
    missing = missing_templates()
    if missing:
        joined = ", ".join(f"{s}/{lang}" for s, lang in missing)
        raise ValueError(f"missing answer templates: {joined}")


def render(scenario: str, language: Language, *, count: int | None = None, **fields: Any) -> str:
    template = TEMPLATES[(scenario, language)]
    if isinstance(template, Plural):
        template = template.pick(count if count is not None else 0)
    return template.format(count=count, **fields)


def format_date(value: datetime, language: Language) -> str:
    month = MONTH_ABBREVIATIONS[language][value.month - 1]
    if language == "es":
        return f"{value.day} {month} {value.year}"
    return f"{month} {value.day}, {value.year}"
