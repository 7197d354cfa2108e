"""
Batch re-analysis — re-score a set of tenders after the policy or the
negative-keyword list changes.

Every tender is scored independently. A tender that blows up is logged and
reported in BatchOutcome.failures; the others are still scored.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from eligibility.models import CompanyPolicy, MatchResult, NegativeKeyword, Tender
from eligibility.scorer import analyze

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    results: Dict[str, MatchResult] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)   # tender_id -> error
    scored: int = 0

    @property
    def total(self) -> int:
        return self.scored + len(self.failures)


def analyze_tender(
    tender: Tender,
    policy: CompanyPolicy,
    negative_keywords: Sequence[NegativeKeyword],
) -> MatchResult:
    """Run the engine on an ingested Tender, passing its sheet flags through."""
    return analyze(
        tender.text(),
        policy,
        negative_keywords,
        excel_msme_exemption=tender.msme_exemption_flag,
        excel_startup_exemption=tender.startup_exemption_flag,
        similar_category=tender.similar_category,
    )


def _score_one(
    tender: Tender,
    policy: CompanyPolicy,
    negative_keywords: Sequence[NegativeKeyword],
) -> Tuple[Tender, Optional[MatchResult], Optional[str]]:
    try:
        return tender, analyze_tender(tender, policy, negative_keywords), None
    except Exception as exc:
        logger.error("Re-analysis failed for tender %s: %s", tender.tender_id, exc, exc_info=True)
        return tender, None, str(exc)


def reanalyze_all(
    tenders: List[Tender],
    policy: CompanyPolicy,
    negative_keywords: Sequence[NegativeKeyword] = (),
    max_workers: int = 1,
) -> BatchOutcome:
    """
    Score every tender and attach the fresh result to tender.match.

    Args:
        tenders:            Ingested tenders. Results are keyed by tender_id; a
                            repeated ID keeps its latest result.
        policy:             Policy to score against.
        negative_keywords:  Current exclusion list.
        max_workers:        >1 fans out over a thread pool; order is not guaranteed.

    Returns:
        BatchOutcome with per-tender results and failures.
    """
    logger.info("Re-analysing %d tender(s) …", len(tenders))
    outcome = BatchOutcome()

    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            rows = list(pool.map(lambda t: _score_one(t, policy, negative_keywords), tenders))
    else:
        rows = [_score_one(t, policy, negative_keywords) for t in tenders]

    for tender, result, error in rows:
        if error is not None:
            outcome.failures[tender.tender_id] = error
            continue
        tender.match = result
        outcome.results[tender.tender_id] = result
        outcome.scored += 1

    logger.info(
        "Re-analysis done: %d scored, %d failed.",
        outcome.scored, len(outcome.failures),
    )
    return outcome
