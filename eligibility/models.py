"""
Value types shared by every stage of the eligibility engine.

Inputs (TenderText, CompanyPolicy, NegativeKeyword) are plain dataclasses the
caller builds; outputs (MatchResult, FieldChange) are frozen so a stored
result can never drift from the inputs that produced it.
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from eligibility.patterns import DEFAULT_PROJECT_TYPES, PROJECT_TYPE_KEYWORDS


class PolicyError(ValueError):
    """Raised when company policy or keyword configuration is malformed."""


class AnalysisStatus(str, Enum):
    ANALYZED = "analyzed"
    UNABLE_TO_ANALYZE = "unable_to_analyze"
    NOT_ELIGIBLE = "not_eligible"


class EligibilityStatus(str, Enum):
    ELIGIBLE = "eligible"
    NOT_ELIGIBLE = "not_eligible"
    NOT_RELEVANT = "not_relevant"
    MANUAL_REVIEW = "manual_review"


# ── Inputs ────────────────────────────────────────────────────────────────────

@dataclass
class TenderText:
    title: str = ""
    eligibility_criteria: Optional[str] = None
    checklist: Optional[str] = None
    similar_category: Optional[str] = None   # short label from the GeM sheet

    def corpus(self) -> str:
        """Title, eligibility criteria and checklist as one lowercase string."""
        parts = [self.title or "", self.eligibility_criteria or "", self.checklist or ""]
        return " ".join(" ".join(parts).split()).lower()


@dataclass(frozen=True)
class CompanyPolicy:
    turnover_lakhs: Decimal = Decimal("400")
    project_types: frozenset = frozenset(DEFAULT_PROJECT_TYPES)

    @classmethod
    def from_mapping(cls, data: dict) -> "CompanyPolicy":
        """
        Build a policy from a profile mapping, failing fast on bad values.

        Expected keys: turnover_lakhs (number or numeric string) and
        project_types (list of category names from PROJECT_TYPE_KEYWORDS).
        """
        raw_turnover = data.get("turnover_lakhs", "400")
        if isinstance(raw_turnover, bool):
            raise PolicyError(f"turnover_lakhs must be a number, got {raw_turnover!r}")
        try:
            turnover = Decimal(str(raw_turnover).replace(",", "").strip())
        except InvalidOperation:
            raise PolicyError(f"turnover_lakhs must be a number, got {raw_turnover!r}") from None
        if not turnover.is_finite() or turnover < 0:
            raise PolicyError(f"turnover_lakhs must be a non-negative number, got {raw_turnover!r}")

        types = data.get("project_types")
        if types is None:
            types = DEFAULT_PROJECT_TYPES
        if isinstance(types, str) or not isinstance(types, (list, tuple, set, frozenset)):
            raise PolicyError("project_types must be a list of category names")
        unknown = [t for t in types if t not in PROJECT_TYPE_KEYWORDS]
        if unknown:
            raise PolicyError(
                "Unknown project type(s): %s (known: %s)"
                % (", ".join(map(str, unknown)), ", ".join(PROJECT_TYPE_KEYWORDS))
            )
        return cls(turnover_lakhs=turnover, project_types=frozenset(types))


@dataclass(frozen=True)
class NegativeKeyword:
    keyword: str
    description: Optional[str] = None


def load_negative_keywords(entries: Optional[Iterable]) -> List[NegativeKeyword]:
    """
    Accepts plain strings, {keyword, description} dicts, or a
    keyword → description mapping. Blank keywords are rejected.
    """
    if not entries:
        return []
    if isinstance(entries, dict):
        entries = [{"keyword": k, "description": v} for k, v in entries.items()]

    keywords: List[NegativeKeyword] = []
    for entry in entries:
        if isinstance(entry, str):
            word, desc = entry, None
        elif isinstance(entry, dict):
            word, desc = entry.get("keyword"), entry.get("description")
        else:
            raise PolicyError(f"Negative keyword entry must be a string or mapping, got {entry!r}")
        if not isinstance(word, str) or not word.strip():
            raise PolicyError(f"Negative keyword is blank: {entry!r}")
        keywords.append(NegativeKeyword(keyword=word.strip(), description=desc))
    return keywords


# ── Outputs ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MatchResult:
    match_percentage: int
    is_msme_exempted: bool
    is_startup_exempted: bool
    tags: Tuple[str, ...]
    analysis_status: AnalysisStatus
    eligibility_status: EligibilityStatus
    not_relevant_keyword: Optional[str] = None
    turnover_required_lakhs: Optional[Decimal] = None
    turnover_met: bool = False

    def as_dict(self) -> dict:
        """JSON-friendly view (enums as strings, Decimal as str)."""
        data = asdict(self)
        data["tags"] = list(self.tags)
        data["analysis_status"] = self.analysis_status.value
        data["eligibility_status"] = self.eligibility_status.value
        if self.turnover_required_lakhs is not None:
            data["turnover_required_lakhs"] = str(self.turnover_required_lakhs)
        return data


@dataclass(frozen=True)
class FieldChange:
    field_name: str
    old_value: str
    new_value: str


# ── Ingested tender record ────────────────────────────────────────────────────

@dataclass
class Tender:
    # ── Identity ─────────────────────────────────────────────────────────────
    tender_id: str = ""
    tender_type: str = "non_gem"     # "gem" | "non_gem"
    title: str = ""

    # ── Organisation ─────────────────────────────────────────────────────────
    department: Optional[str] = None
    organization: Optional[str] = None

    # ── Financials (as published) ────────────────────────────────────────────
    estimated_value: Optional[str] = None
    emd_amount: Optional[str] = None
    turnover_requirement: Optional[str] = None   # Lakhs, from the sheet column

    # ── Dates ────────────────────────────────────────────────────────────────
    submission_deadline: Optional[str] = None
    opening_date: Optional[str] = None

    # ── Text analysed by the engine ──────────────────────────────────────────
    eligibility_criteria: Optional[str] = None
    checklist: Optional[str] = None
    similar_category: Optional[str] = None

    # ── Structured exemption columns ─────────────────────────────────────────
    msme_exemption_flag: bool = False
    startup_exemption_flag: bool = False

    # ── Set by the pipeline, not the reader ──────────────────────────────────
    match: Optional[MatchResult] = None
    is_corrigendum: bool = False
    changes: list = field(default_factory=list)

    def text(self) -> TenderText:
        return TenderText(
            title=self.title,
            eligibility_criteria=self.eligibility_criteria,
            checklist=self.checklist,
            similar_category=self.similar_category,
        )

    def display_turnover(self) -> str:
        if self.match and self.match.turnover_required_lakhs is not None:
            return f"₹{self.match.turnover_required_lakhs:,} Lakh"
        return "Not stated"
