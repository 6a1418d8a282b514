"""Synonym-equivalence index.

Each line of a synonym list defines one group of interchangeable words. Every
word on the line maps to the group's fingerprint, an md5 digest of the line,
so two words compare equal exactly when they were declared on the same line.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional

from tuple_canonicalizer import CanonicalToken, canonical_token
from word_sources import SourceUnavailable, read_lines

logger = logging.getLogger(__name__)


def group_fingerprint(line: str) -> str:
    """Stable fingerprint of a synonym group's defining line."""
    normalized = " ".join(line.split())
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()


class SynonymIndex(Mapping):
    """Read-only ``word -> group fingerprint`` mapping."""

    def __init__(self, mapping: Optional[Dict[str, str]] = None) -> None:
        self._mapping: Dict[str, str] = dict(mapping or {})

    @classmethod
    def build(cls, lines: Iterable[str]) -> "SynonymIndex":
        """Build an index from synonym-group lines.

        A word repeated in a later line is reassigned to that line's group.
        Blank lines contribute nothing.
        """
        mapping: Dict[str, str] = {}
        for line in lines:
            words = line.split()
            if not words:
                continue
            fingerprint = group_fingerprint(line)
            for word in words:
                mapping[word] = fingerprint
        return cls(mapping)

    def __getitem__(self, word: str) -> str:
        return self._mapping[word]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"SynonymIndex(words={len(self._mapping)}, groups={len(set(self._mapping.values()))})"

    def group_of(self, word: str) -> Optional[str]:
        return self._mapping.get(word)

    def canonical_token(self, word: str) -> CanonicalToken:
        """Group fingerprint for known words, the raw word otherwise."""
        return canonical_token(word, self._mapping)


def load_synonym_index(path: Optional[Path | str], encoding: str = "utf-8") -> SynonymIndex:
    """Load an index from a synonym file, or an empty one if it is unavailable."""
    if path is None:
        return SynonymIndex()
    try:
        lines = read_lines(path, encoding)
    except SourceUnavailable as e:
        logger.error("%s", e)
        return SynonymIndex()
    index = SynonymIndex.build(lines)
    logger.debug("Loaded %d synonym words from %s", len(index), path)
    return index
