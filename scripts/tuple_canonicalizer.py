"""Sliding-window tuple canonicalization.

A document is read as a stream of words. Every run of ``k`` consecutive words
(stride 1) becomes a tuple; each word in the tuple is replaced by its
synonym-group fingerprint when the index knows it, and kept as-is otherwise.
The tuple is then reduced to a fingerprint used for set membership tests.

Assumption: two distinct canonical tuples never share a fingerprint. md5 over
an unambiguous encoding makes a collision astronomically unlikely, and the
scorer treats fingerprint equality as tuple equality.
"""

from __future__ import annotations

import hashlib
import json
from collections import deque
from typing import Deque, Iterable, Iterator, Mapping, NamedTuple, Sequence

GROUP = "group"
WORD = "word"


class InvalidTupleSize(ValueError):
    """Tuple size is not a positive integer."""


class CanonicalToken(NamedTuple):
    """A word as seen by the comparison: a group fingerprint or the raw word.

    ``kind`` keeps the two apart, so a word whose text happens to equal some
    group's fingerprint never matches that group.
    """

    kind: str
    value: str

    @classmethod
    def group(cls, fingerprint: str) -> "CanonicalToken":
        return cls(GROUP, fingerprint)

    @classmethod
    def raw(cls, word: str) -> "CanonicalToken":
        return cls(WORD, word)


def validate_tuple_size(k: object) -> int:
    """Return ``k`` if it is a positive integer, else raise InvalidTupleSize."""
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise InvalidTupleSize(f"Tuple size must be a positive integer, got {k!r}")
    return k


def canonical_token(word: str, index: Mapping[str, str]) -> CanonicalToken:
    fingerprint = index.get(word)
    if fingerprint is None:
        return CanonicalToken.raw(word)
    return CanonicalToken.group(fingerprint)


def tuple_fingerprint(tokens: Sequence[CanonicalToken]) -> str:
    """Fingerprint of an ordered tuple of canonical tokens.

    JSON escaping keeps the encoding injective: no choice of words can make
    two different token sequences serialize to the same text.
    """
    encoded = json.dumps([[t.kind, t.value] for t in tokens], ensure_ascii=False, separators=(",", ":"))
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()


def canonicalize(words: Iterable[str], index: Mapping[str, str], k: int) -> Iterator[str]:
    """Yield one fingerprint per ``k``-word window of ``words``.

    Produces ``n - k + 1`` fingerprints for ``n >= k`` words and nothing for
    shorter inputs. Consumes ``words`` exactly once. An invalid ``k`` raises
    InvalidTupleSize immediately, before any word is read.
    """
    return _windows(words, index, validate_tuple_size(k))


def _windows(words: Iterable[str], index: Mapping[str, str], k: int) -> Iterator[str]:
    window: Deque[CanonicalToken] = deque(maxlen=k)
    for word in words:
        window.append(canonical_token(word, index))
        if len(window) == k:
            yield tuple_fingerprint(window)
