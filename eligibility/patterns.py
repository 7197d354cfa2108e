"""
Pattern tables for the eligibility engine.

Everything here is ordered data: the order of families, patterns and
vocabulary entries decides which match wins, so edits change classification
results. Bump PATTERNS_VERSION whenever a table changes and re-run the
regression tests in tests/unit/.

All text is matched against the lowercase corpus built by
TenderText.corpus().
"""

import re

PATTERNS_VERSION = "3.2"

# ── Turnover amounts ──────────────────────────────────────────────────────────

_NUM = r"(\d[\d,]*(?:\.\d+)?)"
_CURRENCY = r"(?:(?<!\w)rs\.?|(?<!\w)inr\.?|₹)"
_AT_LEAST = r"(?<!\w)(?:at\s*least|minimum|min\.?|not\s+less\s+than)"
_LAKH = r"(?:lakh|lac)s?\b"
_CRORE = r"(?:crores?|cr)\b"

# (family unit, multiplier to Lakhs, [(pattern, upper bound or None), ...])
TURNOVER_FAMILIES = [
    ("lakh", 1, [
        (re.compile(r"turnover[^.]*?" + _CURRENCY + r"\s*" + _NUM + r"\s*" + _LAKH), None),
        (re.compile(_AT_LEAST + r"\s*(?:of\s*)?(?:" + _CURRENCY + r"\s*)?" + _NUM + r"\s*" + _LAKH), None),
        (re.compile(r"turnover[^.]*?" + _NUM + r"\s*" + _LAKH), None),
    ]),
    ("crore", 100, [
        (re.compile(r"turnover[^.]*?" + _CURRENCY + r"\s*" + _NUM + r"\s*" + _CRORE), None),
        (re.compile(_AT_LEAST + r"\s*(?:of\s*)?(?:" + _CURRENCY + r"\s*)?" + _NUM + r"\s*" + _CRORE), None),
        (re.compile(r"turnover[^.]*?" + _NUM + r"\s*" + _CRORE), None),
        # Bare "<n> crore" also hits tender IDs and contract values; bounded.
        (re.compile(_NUM + r"\s*" + _CRORE), 10000),
    ]),
]

# ── Exemptions ────────────────────────────────────────────────────────────────

NO_EXEMPTION_PATTERNS = [
    re.compile(r"no\s*exemption"),
    re.compile(r"exemption\s*not\s*allowed"),
    re.compile(r"exemption\s*not\s*applicable"),
    re.compile(r"no\s*relaxation"),
    re.compile(r"relaxation\s*not\s*allowed"),
    re.compile(r"mandatory\s*requirement"),
    re.compile(r"strictly\s*required"),
]

MSME_EXEMPTION_PATTERNS = [
    re.compile(r"msmes?\s*(?:are|is)?\s*exempt(?:ed)?"),
    re.compile(r"exempt(?:ed|ion)?\s*(?:for|to)?\s*msme"),
    re.compile(r"relaxation\s*(?:for|to)?\s*msme"),
    re.compile(r"msme\s*relaxation"),
    re.compile(r"waiver\s*(?:for|to)?\s*msme"),
    re.compile(r"turnover\s*(?:requirement|criteria)?\s*(?:is\s*)?(?:exempt(?:ed)?|waived|relaxed|not\s*applicable)\s*(?:for|to)?\s*msme"),
    re.compile(r"prior\s*turnover\s*(?:is\s*)?(?:exempt(?:ed)?|waived|not\s*required)"),
    re.compile(r"turnover\s*criteria\s*(?:is\s*)?(?:relaxed|waived|exempted)"),
]

STARTUP_EXEMPTION_PATTERNS = [
    re.compile(r"start-?ups?\s*(?:are|is)?\s*exempt(?:ed)?"),
    re.compile(r"exempt(?:ed|ion)?\s*(?:for|to)?\s*start-?up"),
    re.compile(r"relaxation\s*(?:for|to)?\s*start-?up"),
    re.compile(r"start-?up\s*relaxation"),
    re.compile(r"dpiit\s*registered\s*start-?up"),
    re.compile(r"recogni[sz]ed\s*start-?up"),
    re.compile(r"turnover\s*(?:requirement|criteria)?\s*(?:is\s*)?(?:exempt(?:ed)?|waived|relaxed|not\s*applicable)\s*(?:for|to)?\s*start-?up"),
]

# ── Project-type vocabulary (substring match) ─────────────────────────────────

PROJECT_TYPE_KEYWORDS = {
    "Software": ["software", "application", "app development", "programming", "coding", "erp", "crm", "portal"],
    "Website": ["website", "web portal", "web development", "web application", "web design", "wordpress", "e-commerce", "ecommerce"],
    "Mobile": ["mobile", "android", "ios", "app", "smartphone", "tablet"],
    "IT Projects": ["it project", "information technology", "ict", "digitization", "digital", "automation", "computerization", "ites", "it/ites", "it services"],
    "Manpower Deployment": ["manpower", "staff", "personnel", "resource", "outsourcing", "deployment", "hiring", "recruitment", "human resource"],
    "Consulting": ["consulting", "consultancy", "advisory", "audit", "assessment"],
    "Maintenance": ["maintenance", "amc", "annual maintenance", "support", "operation"],
    "Cloud Services": ["cloud", "aws", "azure", "hosting", "server", "datacenter", "data center"],
    "Data Analytics": ["data", "analytics", "bi", "business intelligence", "dashboard", "reporting", "ml", "machine learning", "ai", "artificial intelligence"],
    "Cybersecurity": ["security", "cyber", "firewall", "encryption", "ssl", "audit", "vapt", "penetration"],
}

DEFAULT_PROJECT_TYPES = ["Software", "Website", "Mobile", "IT Projects", "Manpower Deployment"]

# ── Resolver vocabulary (word-boundary match) ─────────────────────────────────

# Title phrases that mark a buy-the-goods tender.
PROCUREMENT_PHRASES = [
    "supply of",
    "supply and installation of",
    "supply, installation",
    "procurement of",
    "purchase of",
    "rate contract for supply",
    "rate contract for the supply",
    "buying of",
]

SERVICE_VERB_PHRASES = [
    "development",
    "deployment",
    "implementation",
    "amc",
    "annual maintenance",
    "operation and maintenance",
    "customization",
    "customisation",
    "integration",
    "hiring of agency",
    "hiring of an agency",
    "selection of agency",
    "engagement of agency",
    "empanelment of agency",
]

IT_DOMAIN_NOUNS = [
    "software",
    "website",
    "web portal",
    "web application",
    "web based",
    "mobile app",
    "mobile application",
    "it project",
    "it services",
    "it/ites",
    "ites",
    "erp",
    "e-governance",
    "information technology",
]

EQUIPMENT_NOUNS = [
    "equipment",
    "hardware",
    "computers?",
    "laptops?",
    "desktops?",
    "printers?",
    "scanners?",
    "servers?",
    "ups",
    "projectors?",
    "cctv",
    "furniture",
    "machinery",
    "machines?",
    "vehicles?",
    "instruments?",
    "spares?",
    "spare parts",
]

# Corpus words that put a tender inside the company's core domain.
CORE_DOMAIN_KEYWORDS = [
    "software",
    "it services",
    "it/ites",
    "ites",
    "information technology",
    "manpower",
    "erp",
    "website",
    "web portal",
    "mobile app",
    "e-governance",
    "data entry",
    "digitization",
    "digitisation",
    "outsourcing",
]

# Labels from the GeM "Similar Category" column treated as core service.
CORE_SERVICE_CATEGORIES = [
    "it",
    "ites",
    "it/ites",
    "software",
    "website",
    "web development",
    "mobile app",
    "erp",
    "manpower",
    "manpower outsourcing",
    "data entry",
    "e-governance",
]

# ── Scorer vocabulary ─────────────────────────────────────────────────────────

# Partial project-type credit when no configured tag matched. Plain substrings,
# like the tag vocabulary, so "it" also hits inside longer words.
GENERIC_IT_KEYWORDS = [
    "software", "it", "technology", "digital", "computer", "web", "mobile",
    "application", "development", "system", "portal", "manpower", "staff",
    "ites", "it/ites", "it services",
]

# Clearly out-of-domain words (prefix match, so "roads" counts, "broadband" not).
HARD_NEGATIVE_WORDS = [
    "civil", "construction", "building", "road", "bridge", "infrastructure",
    "medical", "pharmaceutical", "electrical", "mechanical",
]


def phrase_pattern(phrases, whole_word=True):
    """Compile a list of phrases (already regex-safe or escaped) into one alternation."""
    body = "|".join(phrases)
    if whole_word:
        return re.compile(r"(?<!\w)(?:" + body + r")(?!\w)")
    return re.compile(r"(?<!\w)(?:" + body + r")")


def _escaped(words):
    return [re.escape(w) for w in words]


PROCUREMENT_RE = phrase_pattern(_escaped(PROCUREMENT_PHRASES))
SERVICE_VERB_RE = phrase_pattern(_escaped(SERVICE_VERB_PHRASES))
IT_DOMAIN_RE = phrase_pattern(_escaped(IT_DOMAIN_NOUNS))
EQUIPMENT_RE = phrase_pattern(EQUIPMENT_NOUNS)
CORE_DOMAIN_RE = phrase_pattern(_escaped(CORE_DOMAIN_KEYWORDS))
CORE_SERVICE_CATEGORY_RE = phrase_pattern(_escaped(CORE_SERVICE_CATEGORIES))
HARD_NEGATIVE_RE = phrase_pattern(_escaped(HARD_NEGATIVE_WORDS), whole_word=False)
