"""
main.py — entry point for the Tender Eligibility Analyser.

Usage:
    python main.py tenders.xlsx              # Analyse and save an Excel report
    python main.py tenders.xlsx --score 60   # Only list eligible tenders with score >= 60
    python main.py tenders.xlsx --dry-run    # Print results to console, don't save Excel
    python main.py tenders.xlsx --profile other_profile.yaml
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List

# ── Logging setup ─────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  —  %(message)s",
    datefmt="%H:%M:%S",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("analyser.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger("main")

import config
from eligibility.models import EligibilityStatus, PolicyError, Tender
from filters.tender_filter import filter_tenders, process_tenders
from ingest.excel_reader import read_tenders
from output_engine.excel_exporter import export_to_excel


def run_analysis(path: str, profile: config.Profile, min_score: int, dry_run: bool = False) -> str | None:
    """
    Full cycle:  read → analyse → filter → export.
    Returns the path to the saved Excel file, or None on dry-run / empty input.
    """
    run_start = datetime.now()
    logger.info("Analysing %s against %s", path, profile.company_name)

    tenders, stats = read_tenders(path)
    if not tenders:
        logger.warning("No tenders found in %s (sheets: %s).", path, ", ".join(stats.sheets))
        return None

    process_tenders(tenders, profile.policy, profile.negative_keywords)
    eligible = filter_tenders(tenders, min_score=min_score)

    _print_summary(eligible, tenders, run_start)

    if dry_run:
        logger.info("Dry-run mode — no Excel file saved.")
        return None

    filepath = export_to_excel(eligible, tenders, output_dir=profile.output_dir)
    logger.info("Report saved: %s", filepath)
    return filepath


def _print_summary(eligible: List[Tender], all_tenders: List[Tender], run_start: datetime) -> None:
    """Status counts, then the best eligible tenders as a table."""
    elapsed = round((datetime.now() - run_start).total_seconds(), 1)
    counts = {status: 0 for status in EligibilityStatus}
    for t in all_tenders:
        if t.match:
            counts[t.match.eligibility_status] += 1
    corrigenda = sum(1 for t in all_tenders if t.is_corrigendum)

    print()
    print("━" * 72)
    print(f"  TENDER ELIGIBILITY RESULTS  —  {datetime.now().strftime('%d %b %Y')}")
    print("━" * 72)
    print(f"  Total read    : {len(all_tenders):>4}")
    for status, n in counts.items():
        label = status.value.replace("_", " ").capitalize()
        print(f"  {label:<14}: {n:>4}")
    print(f"  Corrigenda    : {corrigenda:>4}")
    print(f"  Took          : {elapsed}s")
    print("━" * 72)

    if not eligible:
        print("  No eligible tenders above the minimum score.")
        print()
        return

    print(f"  {'#':>3}  {'Match':>5}  {'Tender ID':<20}  {'Title':<38}  {'Tags'}")
    print("  " + "  ".join("─" * w for w in (3, 5, 20, 38, 14)))

    for i, t in enumerate(eligible[:30], 1):   # Show top 30 in console
        score_str = f"{t.match.match_percentage:>4}%"
        tender_id = t.tender_id[:20]
        title = (t.title[:37] + "…") if len(t.title) > 38 else t.title.ljust(38)
        print(f"  {i:>3}  {score_str}  {tender_id:<20}  {title}  {', '.join(t.match.tags)}")

    if len(eligible) > 30:
        print(f"  … and {len(eligible) - 30} more — see the Excel file for full list.")
    print("━" * 72)


# ── CLI ───────────────────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(
        description="Tender Eligibility Analyser — classify tenders against your company profile"
    )
    parser.add_argument("workbook", help="Path to the tender .xlsx export")
    parser.add_argument(
        "--profile",
        default=None,
        help="Profile YAML to use instead of my_profile.yaml",
    )
    parser.add_argument(
        "--score",
        type=int,
        default=None,
        help="Minimum match score for the Eligible sheet (default: read from the profile)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print results to console only — do not save Excel",
    )
    args = parser.parse_args()

    try:
        profile = config.load_profile(args.profile) if args.profile else config.load_profile()
    except (OSError, PolicyError) as exc:
        logger.error("Could not load profile: %s", exc)
        sys.exit(2)

    # Score: CLI flag wins; otherwise use what's in the profile
    min_score = args.score if args.score is not None else profile.minimum_match_score

    run_analysis(args.workbook, profile, min_score=min_score, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
