"""
Core-service / negative-keyword resolver.

A negative keyword in the text does not on its own make a tender
irrelevant: an IT-service tender often mentions excluded goods in passing
("AMC of software incl. printers"). The resolver decides whether the hits
should exclude the tender by running an ordered rule list; the first rule
that returns a Verdict decides.

    1. no_negative_hits   nothing matched                 -> keep
    2. title_primary      keyword is the title's subject  -> exclude,
                          unless the tender is an IT-service tender
    3. domain_fallback    nothing ties the tender to the
                          core domain                     -> exclude
    4. ignore             hits are incidental             -> keep

IT-service intent is denied outright by a procurement phrase in the title
("supply of", "purchase of", ...), so a goods tender that mentions software
still falls to rule 2.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from eligibility.models import NegativeKeyword
from eligibility.patterns import (
    CORE_DOMAIN_RE,
    CORE_SERVICE_CATEGORY_RE,
    EQUIPMENT_RE,
    IT_DOMAIN_RE,
    PROCUREMENT_RE,
    SERVICE_VERB_RE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Verdict:
    excluded: bool
    rule: str
    keyword: Optional[str] = None
    matched_keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolverContext:
    title: str                      # lowercase
    corpus: str                     # lowercase, includes the title
    hits: Tuple[NegativeKeyword, ...]
    tags: Tuple[str, ...]
    similar_category: Optional[str]
    it_service: bool

    @property
    def hit_words(self) -> Tuple[str, ...]:
        return tuple(kw.keyword for kw in self.hits)


# ── Signals ───────────────────────────────────────────────────────────────────

def find_negative_hits(corpus: str, keywords: Sequence[NegativeKeyword]) -> List[NegativeKeyword]:
    """Every configured keyword present in the corpus, in configured order."""
    corpus = corpus.lower()
    seen = set()
    hits = []
    for kw in keywords:
        word = kw.keyword.lower()
        if word and word in corpus and word not in seen:
            seen.add(word)
            hits.append(kw)
    return hits


def has_procurement_intent(title: str) -> bool:
    return bool(PROCUREMENT_RE.search(title.lower()))


def is_it_service_tender(title: str, corpus: str) -> bool:
    """A service verb plus an IT-domain noun, and no goods-procurement title."""
    if has_procurement_intent(title):
        return False
    text = corpus.lower()
    return bool(SERVICE_VERB_RE.search(text) and IT_DOMAIN_RE.search(text))


def is_primary_focus(keyword: str, title: str) -> bool:
    title = title.lower()
    if keyword.lower() in title:
        return True
    return has_procurement_intent(title) and bool(EQUIPMENT_RE.search(title))


def similar_category_is_core(similar_category: Optional[str]) -> bool:
    if not similar_category:
        return False
    return bool(CORE_SERVICE_CATEGORY_RE.search(similar_category.lower()))


def is_core_service_match(title: str, corpus: str, similar_category: Optional[str]) -> bool:
    """IT-service intent, a core-domain keyword, or a core-service Similar Category label."""
    return (
        is_it_service_tender(title, corpus)
        or bool(CORE_DOMAIN_RE.search(corpus.lower()))
        or similar_category_is_core(similar_category)
    )


# ── Rules ─────────────────────────────────────────────────────────────────────

def _no_negative_hits(ctx: ResolverContext) -> Optional[Verdict]:
    if not ctx.hits:
        return Verdict(excluded=False, rule="no_negative_hits")
    return None


def _title_primary(ctx: ResolverContext) -> Optional[Verdict]:
    primary = next((kw for kw in ctx.hits if is_primary_focus(kw.keyword, ctx.title)), None)
    if primary is None:
        return None
    if ctx.it_service:
        return Verdict(excluded=False, rule="it_service_override", matched_keywords=ctx.hit_words)
    return Verdict(
        excluded=True,
        rule="title_primary",
        keyword=primary.keyword,
        matched_keywords=ctx.hit_words,
    )


def _domain_fallback(ctx: ResolverContext) -> Optional[Verdict]:
    in_domain = (
        bool(CORE_DOMAIN_RE.search(ctx.corpus))
        or bool(ctx.tags)
        or similar_category_is_core(ctx.similar_category)
    )
    if in_domain:
        return None
    return Verdict(
        excluded=True,
        rule="domain_fallback",
        keyword=ctx.hits[0].keyword,
        matched_keywords=ctx.hit_words,
    )


def _ignore(ctx: ResolverContext) -> Optional[Verdict]:
    return Verdict(excluded=False, rule="ignore", matched_keywords=ctx.hit_words)


RESOLUTION_RULES: List[Tuple[str, Callable[[ResolverContext], Optional[Verdict]]]] = [
    ("no_negative_hits", _no_negative_hits),
    ("title_primary", _title_primary),
    ("domain_fallback", _domain_fallback),
    ("ignore", _ignore),
]


def resolve_negative_keywords(
    title: str,
    corpus: str,
    negative_keywords: Sequence[NegativeKeyword],
    tags: Sequence[str] = (),
    similar_category: Optional[str] = None,
) -> Verdict:
    """Decide whether the tender's negative-keyword hits exclude it."""
    title = " ".join((title or "").split()).lower()
    corpus = (corpus or "").lower()
    ctx = ResolverContext(
        title=title,
        corpus=corpus,
        hits=tuple(find_negative_hits(corpus, negative_keywords)),
        tags=tuple(tags),
        similar_category=similar_category,
        it_service=is_it_service_tender(title, corpus),
    )

    for name, rule in RESOLUTION_RULES:
        verdict = rule(ctx)
        if verdict is not None:
            if ctx.hits:
                logger.debug(
                    "Negative keywords %s resolved by %s (excluded=%s)",
                    ctx.hit_words, name, verdict.excluded,
                )
            return verdict

    raise AssertionError("RESOLUTION_RULES must end with a catch-all rule")
