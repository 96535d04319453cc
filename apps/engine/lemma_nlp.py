#!/usr/bin/env python3
"""Lemma expansion helpers with safe fallback when spaCy is unavailable."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from text_normalize import normalize


logger = logging.getLogger(__name__)

DISABLE_ENV = "GARDEN_LOGBOOK_DISABLE_SPACY"
SPACY_MODELS: tuple[str, ...] = ("en_core_web_sm", "es_core_news_sm")
EXPANDED_POS = {"NOUN", "VERB", "ADJ"}

Expander = Callable[[str], set[str]]


@dataclass(frozen=True)
class MorphToken:
    surface: str
    lemma: str
    pos: str


def _disabled() -> bool:
    return os.environ.get(DISABLE_ENV) == "1"


@lru_cache(maxsize=None)
def _load_pipeline(model: str) -> Any | None:
    if _disabled():
        return None
    try:
        import spacy
    except Exception:
        logger.debug("spacy is not installed; lemma expansion disabled")
        return None

    try:
        return spacy.load(model, disable=["parser", "ner"])
    except Exception as exc:
        logger.debug("spacy model %s unavailable: %s", model, exc)
        return None


def _pipelines() -> list[Any]:
    loaded = (_load_pipeline(model) for model in SPACY_MODELS)
    return [nlp for nlp in loaded if nlp is not None]


def spacy_available() -> bool:
    if _disabled():
        return False
    return bool(_pipelines())


def tokenize_with_lemma(text: str) -> list[MorphToken]:
    if not text.strip():
        return []
    if _disabled():
        return []

    out: list[MorphToken] = []
    for nlp in _pipelines():
        try:
            doc = nlp(text)
        except Exception as exc:
            logger.debug("spacy failed on input: %s", exc)
            continue
        for tok in doc:
            if tok.is_space or tok.is_punct:
                continue
            lemma = tok.lemma_ or tok.text
            out.append(MorphToken(surface=tok.text, lemma=lemma, pos=tok.pos_))
    return out


def no_expansion(text: str) -> set[str]:
    return set()


def spacy_expansion(text: str) -> set[str]:
    """Normalized surface forms and lemmas of nouns, verbs and adjectives."""
    results: set[str] = set()
    for tok in tokenize_with_lemma(text):
        if tok.pos not in EXPANDED_POS:
            continue
        word = normalize(tok.surface)
        if not word:
            continue
        lemma = normalize(tok.lemma)
        if lemma:
            results.add(lemma)
        results.add(word)
    return results
