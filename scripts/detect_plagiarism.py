#!/usr/bin/env python3
"""Synonym-tolerant plagiarism detection between text documents.

The check works on word tuples:
1. Build a synonym index so interchangeable words compare equal
2. Slide a window of ``k`` words over the reference document and collect the
   fingerprint of every window
3. Slide the same window over the checked document and count how many of its
   windows also occur in the reference

The score is the share of the checked document's tuples found in the
reference. Repeated tuples count on every occurrence; matched reference tuples
are not consumed.

Usage:
    detect_plagiarism.py synonyms.txt file1.txt file2.txt [tuple_size]
    detect_plagiarism.py synonyms.txt --batch submissions/
"""

from __future__ import annotations

import argparse
import csv
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Union

from tqdm import tqdm

from models import (
    DEFAULT_TUPLE_SIZE,
    SEVERITY_ORDER,
    ComparisonConfig,
    ComparisonResult,
    PlagiarismReport,
    PlagiarismSummary,
    Verdict,
    format_percentage,
)
from synonym_index import SynonymIndex, load_synonym_index
from tuple_canonicalizer import InvalidTupleSize, canonicalize, validate_tuple_size
from word_sources import FileWordSource, SourceUnavailable, read_lines

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TUPLE_SIZE_ENV = "PLAGIARISM_TUPLE_SIZE"
SKIP_NAMES = {".git", ".venv", "__pycache__", ".DS_Store"}

SynonymSource = Union[SynonymIndex, Iterable[str]]


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------
@dataclass
class ScoreAccumulator:
    """Running counts while a document is streamed."""
    words: int = 0
    total: int = 0
    matched: int = 0

    def ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.matched / self.total


@dataclass
class ReferenceProfile:
    """Tuple fingerprints collected from one reference document."""
    name: str
    fingerprints: FrozenSet[str] = field(default_factory=frozenset)
    words: int = 0


def _counted(words: Iterable[str], acc: ScoreAccumulator) -> Iterator[str]:
    for word in words:
        acc.words += 1
        yield word


# ---------------------------------------------------------------------------
# Reference Collection & Scoring
# ---------------------------------------------------------------------------
def build_reference(words: Iterable[str], index: SynonymIndex, k: int) -> FrozenSet[str]:
    """Collect the distinct tuple fingerprints of a document."""
    return frozenset(canonicalize(words, index, k))


def _accumulate(
    words: Iterable[str], index: SynonymIndex, k: int, reference: FrozenSet[str]
) -> ScoreAccumulator:
    acc = ScoreAccumulator()
    for fingerprint in canonicalize(_counted(words, acc), index, k):
        acc.total += 1
        if fingerprint in reference:
            acc.matched += 1
    return acc


def score(words: Iterable[str], index: SynonymIndex, k: int, reference: FrozenSet[str]) -> float:
    """Fraction of the document's tuples present in ``reference``.

    A document with fewer than ``k`` words has no tuples and scores 0.0.
    """
    return _accumulate(words, index, k, reference).ratio()


def profile_reference(
    words: Iterable[str], index: SynonymIndex, k: int, name: str = "<reference>"
) -> ReferenceProfile:
    """Build the reference set and remember how many words it came from."""
    acc = ScoreAccumulator()
    fingerprints = build_reference(_counted(words, acc), index, k)
    return ReferenceProfile(name=name, fingerprints=fingerprints, words=acc.words)


def score_against(
    document: Iterable[str],
    profile: ReferenceProfile,
    index: SynonymIndex,
    k: int,
    name: str = "<document>",
) -> ComparisonResult:
    """Score ``document`` against a prepared reference.

    Empty inputs are decided by word count:
    both empty -> 100%, exactly one empty -> 0%, reference shorter than ``k``
    -> 0%, document shorter than ``k`` -> 0%.
    """
    result = ComparisonResult(
        document=name,
        reference=profile.name,
        tuple_size=k,
        score=0.0,
        reference_tuples=len(profile.fingerprints),
    )

    if profile.words == 0:
        # Only need to know whether the document has any word at all.
        words = iter(document)
        try:
            document_empty = next(words, None) is None
        finally:
            close = getattr(words, "close", None)
            if close is not None:
                close()
        result.score = 1.0 if document_empty else 0.0
        return result

    if not profile.fingerprints:
        logger.debug("Reference %s has fewer than %d words", profile.name, k)
        return result

    acc = _accumulate(document, index, k, profile.fingerprints)
    result.total_tuples = acc.total
    result.matched_tuples = acc.matched
    result.score = acc.ratio()
    if acc.words and not acc.total:
        logger.debug("Document %s has fewer than %d words", name, k)
    return result


# ---------------------------------------------------------------------------
# Comparison Entry Points
# ---------------------------------------------------------------------------
def _source_name(source: object, default: str) -> str:
    return str(getattr(source, "name", default))


def _resolve_tuple_size(k: object, errors: List[str]) -> int:
    try:
        return validate_tuple_size(k)
    except InvalidTupleSize as e:
        message = f"{e}; using {DEFAULT_TUPLE_SIZE}"
        logger.warning(message)
        errors.append(message)
        return DEFAULT_TUPLE_SIZE


def compare(
    synonyms: SynonymSource,
    document: Iterable[str],
    reference: Iterable[str],
    k: int = DEFAULT_TUPLE_SIZE,
    *,
    document_name: Optional[str] = None,
    reference_name: Optional[str] = None,
) -> ComparisonResult:
    """Score ``document`` against ``reference`` and never raise for bad input.

    ``synonyms`` is either a built index or raw synonym-group lines. An
    unreadable document gives a 0% result with the problem listed in
    ``errors``; an invalid ``k`` falls back to the default tuple size.
    """
    errors: List[str] = []
    k = _resolve_tuple_size(k, errors)
    index = synonyms if isinstance(synonyms, SynonymIndex) else SynonymIndex.build(synonyms)
    document_name = document_name or _source_name(document, "<document>")
    reference_name = reference_name or _source_name(reference, "<reference>")

    try:
        profile = profile_reference(reference, index, k, reference_name)
        result = score_against(document, profile, index, k, document_name)
    except SourceUnavailable as e:
        logger.error("%s", e)
        errors.append(str(e))
        result = ComparisonResult(
            document=document_name, reference=reference_name, tuple_size=k, score=0.0
        )

    result.errors = errors + result.errors
    return result


def compare_files(
    synonyms_path: Optional[Path | str],
    document_path: Path | str,
    reference_path: Path | str,
    k: int = DEFAULT_TUPLE_SIZE,
    encoding: str = "utf-8",
) -> ComparisonResult:
    """File-backed :func:`compare`. A missing synonym list means no synonyms."""
    errors: List[str] = []
    lines: List[str] = []
    if synonyms_path is not None:
        try:
            lines = read_lines(synonyms_path, encoding)
        except SourceUnavailable as e:
            logger.error("%s", e)
            errors.append(str(e))

    result = compare(
        SynonymIndex.build(lines),
        FileWordSource(document_path, encoding),
        FileWordSource(reference_path, encoding),
        k,
    )
    result.errors = errors + result.errors
    return result


def discover_documents(root: Path) -> List[Path]:
    """Regular files directly under ``root``, sorted by name."""
    return sorted(
        p for p in root.iterdir()
        if p.is_file() and p.name not in SKIP_NAMES and not p.name.startswith(".")
    )


def compare_all(
    paths: Sequence[Path],
    index: SynonymIndex,
    k: int = DEFAULT_TUPLE_SIZE,
    encoding: str = "utf-8",
    progress: bool = True,
) -> List[ComparisonResult]:
    """Score every document against every other document.

    Each reference set is built once and reused for all documents checked
    against it. Unreadable files produce 0% results for their pairs.
    """
    k = validate_tuple_size(k)
    profiles: Dict[Path, ReferenceProfile] = {}
    failures: Dict[Path, str] = {}

    for path in tqdm(paths, desc="Collecting tuples", disable=not progress):
        try:
            profiles[path] = profile_reference(FileWordSource(path, encoding), index, k, str(path))
        except SourceUnavailable as e:
            logger.error("%s", e)
            failures[path] = str(e)

    results: List[ComparisonResult] = []
    total_pairs = len(paths) * (len(paths) - 1)
    with tqdm(total=total_pairs, desc="Comparing", disable=not progress) as pbar:
        for document in paths:
            for reference in paths:
                if document == reference:
                    continue
                pair_errors = [failures[p] for p in (document, reference) if p in failures]
                if pair_errors:
                    results.append(ComparisonResult(
                        document=str(document),
                        reference=str(reference),
                        tuple_size=k,
                        score=0.0,
                        errors=pair_errors,
                    ))
                else:
                    try:
                        results.append(score_against(
                            FileWordSource(document, encoding), profiles[reference], index, k, str(document)
                        ))
                    except SourceUnavailable as e:
                        logger.error("%s", e)
                        results.append(ComparisonResult(
                            document=str(document),
                            reference=str(reference),
                            tuple_size=k,
                            score=0.0,
                            errors=[str(e)],
                        ))
                pbar.update(1)

    return results


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
def build_report(results: List[ComparisonResult], k: int) -> PlagiarismReport:
    """Summarise batch results, flagged pairs first by severity."""
    ordered = sorted(results, key=lambda r: (SEVERITY_ORDER[r.verdict], -r.score))
    summary = PlagiarismSummary(
        total_pairs_analyzed=len(results),
        high_plagiarism=sum(1 for r in results if r.verdict == Verdict.HIGH_PLAGIARISM),
        suspicious=sum(1 for r in results if r.verdict == Verdict.SUSPICIOUS),
        needs_review=sum(1 for r in results if r.verdict == Verdict.NEEDS_REVIEW),
        failed=sum(1 for r in results if r.errors),
    )
    return PlagiarismReport(
        tuple_size=k,
        summary=summary,
        flagged_pairs=[r for r in ordered if r.verdict != Verdict.likely_clean],
        all_pairs=ordered,
    )


def write_plagiarism_report(output_path: Path, report: PlagiarismReport) -> None:
    """Write detailed plagiarism report."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")


def write_plagiarism_csv(output_path: Path, results: List[ComparisonResult]) -> None:
    """Write CSV summary."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = []
    for r in results:
        rows.append({
            "document": r.document,
            "reference": r.reference,
            "plagiarism_score": round(r.score, 4),
            "percentage": r.percentage,
            "verdict": r.verdict.value,
        })

    rows.sort(key=lambda x: -x["plagiarism_score"])

    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(
            f, fieldnames=["document", "reference", "plagiarism_score", "percentage", "verdict"]
        )
        writer.writeheader()
        writer.writerows(rows)


def print_summary(report: PlagiarismReport) -> None:
    print("\n" + "=" * 70)
    print("PLAGIARISM DETECTION SUMMARY")
    print("=" * 70)

    by_verdict: Dict[Verdict, List[ComparisonResult]] = {}
    for r in report.flagged_pairs:
        by_verdict.setdefault(r.verdict, []).append(r)

    high = by_verdict.get(Verdict.HIGH_PLAGIARISM, [])
    suspicious = by_verdict.get(Verdict.SUSPICIOUS, [])
    review = by_verdict.get(Verdict.NEEDS_REVIEW, [])

    print(f"\n🚨 HIGH PLAGIARISM: {len(high)} pairs")
    for r in high:
        print(f"   • {r.document} -> {r.reference} ({r.percentage}, {r.matched_tuples}/{r.total_tuples} tuples)")

    print(f"\n⚠️  SUSPICIOUS: {len(suspicious)} pairs")
    for r in suspicious:
        print(f"   • {r.document} -> {r.reference} ({r.percentage})")

    print(f"\n📋 NEEDS REVIEW: {len(review)} pairs")
    for r in review[:10]:
        print(f"   • {r.document} -> {r.reference} ({r.percentage})")

    if report.summary.failed:
        print(f"\n❌ {report.summary.failed} pairs could not be compared (see log)")

    if not high and not suspicious:
        print("\n✅ No significant plagiarism detected!")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def parse_tuple_size(raw: Optional[str], default: int = DEFAULT_TUPLE_SIZE) -> int:
    """Parse a tuple size, falling back to ``default`` when unusable."""
    if raw is None or raw == "":
        return default
    try:
        return validate_tuple_size(int(raw))
    except ValueError:
        logger.warning("Invalid tuple size %r, using %d", raw, default)
        return default


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Percentage of file1's tuples found in file2, treating synonyms as equal"
    )
    parser.add_argument("synonyms", type=Path, help="File with one group of synonyms per line")
    parser.add_argument("file1", type=Path, nargs="?", help="File to check for plagiarism")
    parser.add_argument("file2", type=Path, nargs="?", help="Reference file the tuples are collected from")
    parser.add_argument(
        "tuple_size",
        nargs="?",
        default=None,
        help=f"Words per tuple (default: ${TUPLE_SIZE_ENV} or {DEFAULT_TUPLE_SIZE})",
    )
    parser.add_argument("--batch", type=Path, help="Compare every pair of files in this directory")
    parser.add_argument("--output", default="results/plagiarism_report.json", help="JSON report output (batch)")
    parser.add_argument("--csv-output", default="results/plagiarism_scores.csv", help="CSV summary output (batch)")
    parser.add_argument("--encoding", default="utf-8", help="Encoding of all input files")
    parser.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    env_default = parse_tuple_size(os.environ.get(TUPLE_SIZE_ENV))
    config = ComparisonConfig(
        tuple_size=parse_tuple_size(args.tuple_size, env_default),
        synonyms_path=args.synonyms,
        encoding=args.encoding,
    )

    if args.batch is not None and (args.file1 is not None or args.file2 is not None):
        parser.error("file1 and file2 cannot be combined with --batch")

    if args.batch is not None:
        return run_batch(args, config)

    if args.file1 is None or args.file2 is None:
        parser.error("file1 and file2 are required unless --batch is given")

    result = compare_files(
        config.synonyms_path, args.file1, args.file2, config.tuple_size, config.encoding
    )
    logger.debug(
        "%d/%d tuples matched, %d distinct reference tuples",
        result.matched_tuples, result.total_tuples, result.reference_tuples,
    )
    print(result.percentage)
    return 0


def run_batch(args: argparse.Namespace, config: ComparisonConfig) -> int:
    root_dir: Path = args.batch
    if not root_dir.is_dir():
        logger.error("Batch directory not found: %s", root_dir)
        return 1

    paths = discover_documents(root_dir)
    if len(paths) < 2:
        logger.error("Need at least two documents in %s, found %d", root_dir, len(paths))
        return 1

    print(f"Found {len(paths)} documents")
    index = load_synonym_index(config.synonyms_path, config.encoding)
    results = compare_all(
        paths, index, config.tuple_size, config.encoding, progress=not args.no_progress
    )
    report = build_report(results, config.tuple_size)

    write_plagiarism_report(Path(args.output), report)
    print(f"Wrote detailed report to {args.output}")

    write_plagiarism_csv(Path(args.csv_output), results)
    print(f"Wrote CSV summary to {args.csv_output}")

    print_summary(report)
    return 0


__all__ = [
    "ScoreAccumulator",
    "ReferenceProfile",
    "build_reference",
    "score",
    "profile_reference",
    "score_against",
    "compare",
    "compare_files",
    "compare_all",
    "format_percentage",
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
