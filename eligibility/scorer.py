"""
Scorer — combines every detector into one MatchResult.

Each tender gets a match_percentage from 0-100:

Scoring breakdown:
  50 pts  — turnover: exempted, or company turnover >= requirement
            (40 if the text states no requirement, 0 if unmet)
  30 pts  — project type: at least one configured tag matched
            (15 if only generic IT words are present)
  20 pts  — no hard-negative domain word (civil, medical, electrical, ...)

Overrides, in order:
  blank text                       -> manual_review, 0
  negative keyword excludes        -> not_relevant, 0
  core service / tag / exemption   -> forced to 100 when nothing argues against it
  unmet turnover, no exemption     -> not_eligible, capped at 40
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from eligibility.exemptions import detect_exemptions
from eligibility.models import (
    AnalysisStatus,
    CompanyPolicy,
    EligibilityStatus,
    MatchResult,
    NegativeKeyword,
    TenderText,
)
from eligibility.patterns import GENERIC_IT_KEYWORDS, HARD_NEGATIVE_RE
from eligibility.resolver import is_core_service_match, resolve_negative_keywords
from eligibility.tags import detect_tags
from eligibility.turnover import extract_turnover_lakhs

logger = logging.getLogger(__name__)

TURNOVER_WEIGHT = 50
TURNOVER_UNSTATED_SCORE = 40
PROJECT_TYPE_WEIGHT = 30
PROJECT_TYPE_PARTIAL_SCORE = 15
HARD_NEGATIVE_WEIGHT = 20
TOTAL_WEIGHT = TURNOVER_WEIGHT + PROJECT_TYPE_WEIGHT + HARD_NEGATIVE_WEIGHT

NOT_ELIGIBLE_CAP = 40


def _turnover_score(exempted: bool, required: Optional[Decimal], company: Decimal) -> int:
    if exempted:
        return TURNOVER_WEIGHT
    if required is None:
        return TURNOVER_UNSTATED_SCORE
    if company >= required:
        return TURNOVER_WEIGHT
    return 0


def _project_type_score(tags: Sequence[str], corpus: str) -> int:
    if tags:
        return PROJECT_TYPE_WEIGHT
    if any(kw in corpus for kw in GENERIC_IT_KEYWORDS):
        return PROJECT_TYPE_PARTIAL_SCORE
    return 0


def has_hard_negative(corpus: str) -> bool:
    return bool(HARD_NEGATIVE_RE.search(corpus))


def analyze(
    tender: TenderText,
    policy: CompanyPolicy,
    negative_keywords: Sequence[NegativeKeyword] = (),
    excel_msme_exemption: bool = False,
    excel_startup_exemption: bool = False,
    similar_category: Optional[str] = None,
) -> MatchResult:
    """
    Classify one tender against the company policy.

    Args:
        tender:                   Title, eligibility criteria, checklist.
        policy:                   Company turnover (Lakhs) and accepted project types.
        negative_keywords:        Exclusion list; every hit is considered.
        excel_msme_exemption:     MSME flag from a structured sheet column.
        excel_startup_exemption:  Startup flag from a structured sheet column.
        similar_category:         Category label; defaults to tender.similar_category.

    Returns:
        A new MatchResult. Never raises for missing or odd text.
    """
    if similar_category is None:
        similar_category = tender.similar_category

    corpus = tender.corpus()

    # ── Blank input: nothing to analyse ───────────────────────────────────────
    if not corpus:
        return MatchResult(
            match_percentage=0,
            is_msme_exempted=bool(excel_msme_exemption),
            is_startup_exempted=bool(excel_startup_exemption),
            tags=(),
            analysis_status=AnalysisStatus.UNABLE_TO_ANALYZE,
            eligibility_status=EligibilityStatus.MANUAL_REVIEW,
        )

    exemptions = detect_exemptions(corpus, excel_msme_exemption, excel_startup_exemption)
    tags = detect_tags(corpus, policy.project_types)
    required = extract_turnover_lakhs(corpus)
    turnover_met = exemptions.any or required is None or policy.turnover_lakhs >= required

    # ── Negative keywords ─────────────────────────────────────────────────────
    verdict = resolve_negative_keywords(
        tender.title or "", corpus, negative_keywords, tags, similar_category,
    )
    if verdict.excluded:
        return MatchResult(
            match_percentage=0,
            is_msme_exempted=exemptions.msme,
            is_startup_exempted=exemptions.startup,
            tags=(),
            analysis_status=AnalysisStatus.ANALYZED,
            eligibility_status=EligibilityStatus.NOT_RELEVANT,
            not_relevant_keyword=verdict.keyword,
            turnover_required_lakhs=required,
            turnover_met=turnover_met,
        )

    # ── Weighted criteria ─────────────────────────────────────────────────────
    hard_negative = has_hard_negative(corpus)

    score = _turnover_score(exemptions.any, required, policy.turnover_lakhs)
    score += _project_type_score(tags, corpus)
    if not hard_negative:
        score += HARD_NEGATIVE_WEIGHT

    match_percentage = round(100 * score / TOTAL_WEIGHT)

    if not hard_negative:
        core_service = is_core_service_match(tender.title or "", corpus, similar_category)
        if core_service and turnover_met:
            match_percentage = 100
        elif tags and turnover_met:
            match_percentage = 100
        elif exemptions.any and tags:
            match_percentage = 100

    match_percentage = max(0, min(100, match_percentage))

    analysis_status = AnalysisStatus.ANALYZED
    eligibility_status = EligibilityStatus.ELIGIBLE
    if not turnover_met and required is not None:
        analysis_status = AnalysisStatus.NOT_ELIGIBLE
        eligibility_status = EligibilityStatus.NOT_ELIGIBLE
        match_percentage = min(match_percentage, NOT_ELIGIBLE_CAP)

    logger.debug(
        "Scored %r: %d%% %s (tags=%s, turnover=%s)",
        (tender.title or "")[:60], match_percentage, eligibility_status.value, tags, required,
    )

    return MatchResult(
        match_percentage=match_percentage,
        is_msme_exempted=exemptions.msme,
        is_startup_exempted=exemptions.startup,
        tags=tuple(tags),
        analysis_status=analysis_status,
        eligibility_status=eligibility_status,
        not_relevant_keyword=None,
        turnover_required_lakhs=required,
        turnover_met=turnover_met,
    )
