#!/usr/bin/env python3
"""Keyword/lemma tagger mapping free text onto the tag catalog."""

from __future__ import annotations

from typing import Iterable

from lemma_nlp import Expander, no_expansion
from tag_catalog import TAG_CATALOG, TREE_SPECIES_IDS, Language, TagDefinition
from text_normalize import normalize


MIN_PREFIX_KEYWORD_LEN = 5


def matches_keyword(
    keyword: str,
    tokens: set[str],
    normalized_text: str,
    padded_text: str,
) -> bool:
    if not keyword:
        return False

    if " " in keyword:
        return keyword in normalized_text

    if keyword in tokens:
        return True

    # Inflected forms the lemma step missed ("limones" for "limon").
    if len(keyword) >= MIN_PREFIX_KEYWORD_LEN and any(tok.startswith(keyword) for tok in tokens):
        return True

    return f" {keyword} " in padded_text


class Tagger:
    def __init__(
        self,
        catalog: Iterable[TagDefinition] = TAG_CATALOG,
        expander: Expander = no_expansion,
    ) -> None:
        self.catalog: tuple[TagDefinition, ...] = tuple(catalog)
        self.expander = expander
        self._keywords: list[tuple[str, tuple[str, ...]]] = [
            (definition.id, tuple(normalize(k) for k in definition.keywords))
            for definition in self.catalog
        ]
        self._by_id = {definition.id: definition for definition in self.catalog}

    def _candidate_tokens(self, text: str, normalized: str) -> set[str]:
        direct = {tok for tok in normalized.split(" ") if tok}
        return direct | set(self.expander(text))

    def _match_ids(self, text: str, allowed: Iterable[str] | None = None) -> list[str]:
        normalized = normalize(text)
        tokens = self._candidate_tokens(text, normalized)
        padded = f" {normalized} "
        allowed_ids = set(allowed) if allowed is not None else None

        detected: list[str] = []
        for tag_id, keywords in self._keywords:
            if allowed_ids is not None and tag_id not in allowed_ids:
                continue
            if any(matches_keyword(k, tokens, normalized, padded) for k in keywords):
                detected.append(tag_id)
        return detected

    def extract_tag_ids(self, text: str) -> list[str]:
        return self._match_ids(text)

    def species_for_word(self, word: str) -> str | None:
        """First tree-species id whose keywords match a single word."""
        matched = self._match_ids(word, allowed=TREE_SPECIES_IDS)
        return matched[0] if matched else None

    def tag_name(self, tag_id: str, language: Language) -> str | None:
        definition = self._by_id.get(tag_id)
        if definition is None:
            return None
        return definition.localized_name(language)


DEFAULT_TAGGER = Tagger()


def extract_tag_ids(text: str) -> list[str]:
    return DEFAULT_TAGGER.extract_tag_ids(text)
