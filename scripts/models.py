"""
Pydantic models for plagiarism comparison settings and results.

These models keep CLI settings validated and give the JSON/CSV reports a
consistent shape.
"""

from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, computed_field, field_validator

DEFAULT_TUPLE_SIZE = 3


class Verdict(str, Enum):
    """How worrying a score is."""
    HIGH_PLAGIARISM = "HIGH_PLAGIARISM"
    SUSPICIOUS = "SUSPICIOUS"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    likely_clean = "likely_clean"


SEVERITY_ORDER = {
    Verdict.HIGH_PLAGIARISM: 0,
    Verdict.SUSPICIOUS: 1,
    Verdict.NEEDS_REVIEW: 2,
    Verdict.likely_clean: 3,
}


def verdict_for(score: float) -> Verdict:
    if score >= 0.7:
        return Verdict.HIGH_PLAGIARISM
    if score >= 0.4:
        return Verdict.SUSPICIOUS
    if score >= 0.2:
        return Verdict.NEEDS_REVIEW
    return Verdict.likely_clean


def format_percentage(ratio: float) -> str:
    """Render a ratio in [0, 1] as e.g. ``"66.67%"``."""
    return f"{ratio * 100:.2f}%"


# =============================================================================
# Settings
# =============================================================================

class ComparisonConfig(BaseModel):
    """Settings for one comparison run."""
    tuple_size: int = Field(default=DEFAULT_TUPLE_SIZE, ge=1, description="Words per tuple")
    synonyms_path: Optional[Path] = Field(default=None, description="Synonym list, one group per line")
    encoding: str = Field(default="utf-8", description="Text encoding of all input files")

    @field_validator("tuple_size", mode="before")
    def reject_bool(cls, v):
        """``True`` is an int to Python but never a meaningful tuple size."""
        if isinstance(v, bool):
            raise ValueError("tuple_size must be an integer, not a boolean")
        return v


# =============================================================================
# Results
# =============================================================================

class ComparisonResult(BaseModel):
    """
    Outcome of scoring one document against a reference document.

    ``score`` is the fraction of the document's tuples that also occur in the
    reference. Degenerate inputs (empty documents, fewer words than the tuple
    size, unreadable files) get a defined score instead of an error.
    """
    document: str = Field(..., description="Document that was checked")
    reference: str = Field(..., description="Document the tuples were collected from")
    tuple_size: int = Field(..., ge=1)
    score: float = Field(..., ge=0, le=1, description="Matched tuples / total tuples")
    total_tuples: int = Field(default=0, ge=0)
    matched_tuples: int = Field(default=0, ge=0)
    reference_tuples: int = Field(default=0, ge=0, description="Distinct tuples in the reference")
    errors: list[str] = Field(default_factory=list, description="Problems reported during the run")

    @computed_field
    @property
    def percentage(self) -> str:
        return format_percentage(self.score)

    @computed_field
    @property
    def verdict(self) -> Verdict:
        return verdict_for(self.score)


class PlagiarismSummary(BaseModel):
    """Counts per verdict for a batch run."""
    total_pairs_analyzed: int = Field(..., ge=0)
    high_plagiarism: int = Field(default=0, ge=0)
    suspicious: int = Field(default=0, ge=0)
    needs_review: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0, description="Pairs with unreadable inputs")


class PlagiarismReport(BaseModel):
    """Batch report written by ``detect_plagiarism --batch``."""
    tuple_size: int = Field(..., ge=1)
    summary: PlagiarismSummary
    flagged_pairs: list[ComparisonResult] = Field(default_factory=list)
    all_pairs: list[ComparisonResult] = Field(default_factory=list)


# =============================================================================
# JSON Schema export
# =============================================================================

def get_json_schema() -> dict:
    """Get JSON schema of the batch report."""
    return PlagiarismReport.model_json_schema(mode="serialization")


def get_json_schema_str() -> str:
    """Get JSON schema as formatted string."""
    import json
    return json.dumps(get_json_schema(), indent=2)


if __name__ == "__main__":
    # Print schema for reference
    print(get_json_schema_str())
