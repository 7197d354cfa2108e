"""
Filter engine — runs the eligibility engine over an ingested batch, flags
corrigenda, and picks the tenders worth bidding on.

A tender whose external ID was already seen (earlier in the batch, or in
the `known` mapping passed by the caller) is a corrigendum: it is diffed
field-by-field against the first version and the changes are attached to
the new record.
"""

import logging
from typing import Dict, List, Optional, Sequence

from eligibility.batch import analyze_tender
from eligibility.corrigendum import diff_fields
from eligibility.models import CompanyPolicy, EligibilityStatus, NegativeKeyword, Tender

logger = logging.getLogger(__name__)


def process_tenders(
    tenders: List[Tender],
    policy: CompanyPolicy,
    negative_keywords: Sequence[NegativeKeyword] = (),
    known: Optional[Dict[str, Tender]] = None,
) -> List[Tender]:
    """
    Analyse each tender in place and detect corrigenda.

    Args:
        tenders:            Freshly read tenders, in sheet order.
        policy:             Company policy to score against.
        negative_keywords:  Exclusion list.
        known:              tender_id -> previously stored Tender. Updated
                            with first-seen tenders from this batch.

    Returns:
        The same list, with match / is_corrigendum / changes set. A tender
        that fails to analyse keeps match=None and is logged.
    """
    seen: Dict[str, Tender] = known if known is not None else {}
    failed = 0

    for tender in tenders:
        try:
            tender.match = analyze_tender(tender, policy, negative_keywords)
        except Exception as exc:
            failed += 1
            logger.error("Could not analyse tender %s: %s", tender.tender_id, exc, exc_info=True)

        original = seen.get(tender.tender_id)
        if original is not None:
            tender.is_corrigendum = True
            tender.changes = diff_fields(original, tender)
            logger.info(
                "Corrigendum for %s: %d field(s) changed.", tender.tender_id, len(tender.changes),
            )
        else:
            seen[tender.tender_id] = tender

    logger.info("Analysed %d tender(s), %d failed.", len(tenders), failed)
    return tenders


def filter_tenders(
    tenders: List[Tender],
    min_score: int = 0,
) -> List[Tender]:
    """
    Keep eligible tenders scoring at least min_score, best first.

    Sort: match_percentage descending, then by deadline ascending (closer
    deadlines first; unknown deadlines last).
    """
    kept = [
        t for t in tenders
        if t.match is not None
        and t.match.eligibility_status == EligibilityStatus.ELIGIBLE
        and t.match.match_percentage >= min_score
    ]
    kept.sort(key=lambda t: (-t.match.match_percentage, t.submission_deadline or "9999"))

    logger.info(
        "Filter result: %d/%d tenders kept (min_score=%d).",
        len(kept), len(tenders), min_score,
    )
    return kept
