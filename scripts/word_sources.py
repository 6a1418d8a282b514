"""Word and line sources for plagiarism comparison.

Anything that yields whitespace-delimited tokens can be compared. File sources
are lazy: the file is opened when iteration starts and read line by line, so a
document is never loaded into memory as a whole.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List


class SourceUnavailable(OSError):
    """A document or synonym list could not be read."""

    def __init__(self, path: Path | str, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Couldn't find file at: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


def iter_words(text: str) -> Iterator[str]:
    """Yield whitespace-delimited tokens from ``text``."""
    for line in text.splitlines():
        yield from line.split()


def _open(path: Path, encoding: str):
    try:
        return path.open("r", encoding=encoding, errors="replace")
    except FileNotFoundError:
        raise SourceUnavailable(path) from None
    except OSError as e:
        raise SourceUnavailable(path, e.strerror or str(e)) from e
    except LookupError as e:
        raise SourceUnavailable(path, str(e)) from e


def iter_file_words(path: Path | str, encoding: str = "utf-8") -> Iterator[str]:
    """Lazily yield tokens from the file at ``path``.

    Raises SourceUnavailable on first ``next()`` if the file cannot be opened.
    """
    path = Path(path)
    with _open(path, encoding) as f:
        for line in f:
            yield from line.split()


def read_lines(path: Path | str, encoding: str = "utf-8") -> List[str]:
    """Return the raw lines of ``path`` without trailing newlines."""
    path = Path(path)
    with _open(path, encoding) as f:
        return [line.rstrip("\r\n") for line in f]


class FileWordSource:
    """Re-iterable word source backed by a file.

    Each ``iter()`` call opens a fresh stream, so one source can feed several
    comparison passes.
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    @property
    def name(self) -> str:
        return str(self.path)

    def __iter__(self) -> Iterator[str]:
        return iter_file_words(self.path, self.encoding)

    def __repr__(self) -> str:
        return f"FileWordSource({str(self.path)!r})"


class TextWordSource:
    """In-memory word source."""

    def __init__(self, text: str | Iterable[str], name: str = "<text>") -> None:
        if isinstance(text, str):
            self._tokens = list(iter_words(text))
        else:
            self._tokens = [token for item in text for token in item.split()]
        self.name = name

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"TextWordSource({self.name!r}, words={len(self._tokens)})"
