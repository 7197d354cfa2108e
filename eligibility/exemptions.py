"""
MSME / Startup turnover-exemption detection.

Only explicit exemption, relaxation or waiver statements count; the bare
words "msme" or "startup" do not. Any explicit denial in the text ("no
exemption", "mandatory requirement", ...) overrides the text-derived
exemption, but never a flag supplied from a structured sheet column.
"""

from typing import NamedTuple

from eligibility.patterns import (
    MSME_EXEMPTION_PATTERNS,
    NO_EXEMPTION_PATTERNS,
    STARTUP_EXEMPTION_PATTERNS,
)


class Exemptions(NamedTuple):
    msme: bool
    startup: bool

    @property
    def any(self) -> bool:
        return self.msme or self.startup


def _denied(text: str) -> bool:
    return any(p.search(text) for p in NO_EXEMPTION_PATTERNS)


def _text_exempts(text: str, patterns) -> bool:
    if not text or _denied(text):
        return False
    return any(p.search(text) for p in patterns)


def has_msme_exemption(text: str) -> bool:
    return _text_exempts(text.lower() if text else "", MSME_EXEMPTION_PATTERNS)


def has_startup_exemption(text: str) -> bool:
    return _text_exempts(text.lower() if text else "", STARTUP_EXEMPTION_PATTERNS)


def detect_exemptions(text: str, msme_flag: bool = False, startup_flag: bool = False) -> Exemptions:
    """OR the caller's structured flags with what the text states."""
    return Exemptions(
        msme=bool(msme_flag) or has_msme_exemption(text),
        startup=bool(startup_flag) or has_startup_exemption(text),
    )
