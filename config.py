"""
config.py — reads all settings from my_profile.yaml and exposes them
as the constants that the rest of the application uses.

You should NOT need to edit this file.
Edit my_profile.yaml instead.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import List

import yaml

from eligibility.models import CompanyPolicy, NegativeKeyword, PolicyError, load_negative_keywords

# ── Profile loading ───────────────────────────────────────────────────────────

_HERE = os.path.dirname(os.path.abspath(__file__))
PROFILE_FILE = os.path.join(_HERE, "my_profile.yaml")


@dataclass
class Profile:
    company_name: str = "Company"
    policy: CompanyPolicy = field(default_factory=CompanyPolicy)
    negative_keywords: List[NegativeKeyword] = field(default_factory=list)
    minimum_match_score: int = 0
    output_dir: str = "reports"


def parse_profile(data: dict) -> Profile:
    """Validate a loaded profile mapping. Raises PolicyError on bad values."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PolicyError("Profile must be a mapping of settings")

    try:
        min_score = int(data.get("minimum_match_score", 0))
    except (TypeError, ValueError):
        raise PolicyError(
            f"minimum_match_score must be an integer, got {data.get('minimum_match_score')!r}"
        ) from None
    if not 0 <= min_score <= 100:
        raise PolicyError(f"minimum_match_score must be within 0-100, got {min_score}")

    return Profile(
        company_name=str(data.get("company_name", "Company")),
        policy=CompanyPolicy.from_mapping(data),
        negative_keywords=load_negative_keywords(data.get("negative_keywords")),
        minimum_match_score=min_score,
        output_dir=str(data.get("output_dir", "reports")),
    )


def load_profile(path: str = PROFILE_FILE) -> Profile:
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise PolicyError(f"{path} is not valid YAML: {exc}") from exc
    return parse_profile(data)


def _load_or_exit(path: str) -> Profile:
    """Startup load: a missing file exits 1, an invalid setting exits 2."""
    if not os.path.exists(path):
        print(
            "ERROR: my_profile.yaml not found.\n"
            f"Expected it at: {path}\n"
            "Please make sure the file exists and try again."
        )
        sys.exit(1)
    try:
        return load_profile(path)
    except PolicyError as exc:
        print(f"ERROR: {path} has an invalid setting.\n{exc}")
        sys.exit(2)


_profile = _load_or_exit(PROFILE_FILE)

# ── Company policy ────────────────────────────────────────────────────────────

COMPANY_NAME      = _profile.company_name
COMPANY_POLICY    = _profile.policy
NEGATIVE_KEYWORDS = _profile.negative_keywords

# ── Filter sensitivity ────────────────────────────────────────────────────────

DEFAULT_MIN_SCORE = _profile.minimum_match_score

# ── Output ────────────────────────────────────────────────────────────────────

OUTPUT_DIR      = _profile.output_dir
OUTPUT_FILENAME = "eligibility_{date}.xlsx"
