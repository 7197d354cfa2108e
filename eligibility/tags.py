"""Project-type tag detection, scoped to the categories the company accepts."""

from typing import Iterable, List

from eligibility.patterns import PROJECT_TYPE_KEYWORDS


def detect_tags(text: str, project_types: Iterable[str]) -> List[str]:
    """
    Return the accepted categories whose keywords occur in text.

    Keywords are plain substrings. Result order follows PROJECT_TYPE_KEYWORDS
    so the same policy always yields the same tag order.
    """
    if not text:
        return []
    text = text.lower()
    allowed = set(project_types)

    tags: List[str] = []
    for category, keywords in PROJECT_TYPE_KEYWORDS.items():
        if category not in allowed:
            continue
        if any(kw in text for kw in keywords):
            tags.append(category)
    return tags
