"""
webapp.py — local JSON API around the eligibility engine.

Run:  python webapp.py
Open: http://localhost:5000/api/tenders

Endpoints:
  POST /api/analyze            score one tender sent as JSON
  POST /api/corrigendum/diff   compare two versions of a tender
  POST /api/upload             read an .xlsx export and analyse every row
  GET  /api/tenders            tenders from the last upload
  POST /api/tenders/<id>/documents  append supplemental text, re-analyse
  GET  /api/settings           current company profile
  POST /api/settings           validate + save profile, re-analyse stored tenders
"""

import io
import logging
import threading
from dataclasses import asdict
from pathlib import Path

import yaml
from flask import Flask, jsonify, request

import config
from eligibility.batch import analyze_tender, reanalyze_all
from eligibility.corrigendum import diff_fields
from eligibility.models import PolicyError, TenderText
from eligibility.scorer import analyze
from filters.tender_filter import process_tenders
from ingest.excel_reader import parse_exemption_cell, read_tenders

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger("webapp")

app = Flask(__name__)

# ── Global state ──────────────────────────────────────────────────────────────
profile: config.Profile = config.load_profile()
tenders: list = []
_lock = threading.Lock()

_PROFILE_FILE = Path(config.PROFILE_FILE)


# ── Serialiser ────────────────────────────────────────────────────────────────

def _to_dict(t) -> dict:
    return {
        "tender_id": t.tender_id,
        "tender_type": t.tender_type,
        "title": t.title,
        "department": t.department,
        "organization": t.organization,
        "submission_deadline": t.submission_deadline,
        "is_corrigendum": t.is_corrigendum,
        "changes": [asdict(c) for c in t.changes],
        "match": t.match.as_dict() if t.match else None,
    }


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise PolicyError("Request body must be a JSON object")
    return body


@app.errorhandler(PolicyError)
def _bad_request(exc):
    return jsonify({"error": str(exc)}), 400


# ── Analysis ──────────────────────────────────────────────────────────────────

@app.post("/api/analyze")
def api_analyze():
    body = _json_body()
    text = TenderText(
        title=str(body.get("title") or ""),
        eligibility_criteria=body.get("eligibility_criteria"),
        checklist=body.get("checklist"),
        similar_category=body.get("similar_category"),
    )
    with _lock:
        policy, keywords = profile.policy, profile.negative_keywords
    result = analyze(
        text,
        policy,
        keywords,
        excel_msme_exemption=parse_exemption_cell(body.get("msme_exemption")),
        excel_startup_exemption=parse_exemption_cell(body.get("startup_exemption")),
    )
    return jsonify(result.as_dict())


@app.post("/api/corrigendum/diff")
def api_diff():
    body = _json_body()
    old, new = body.get("old"), body.get("new")
    if not isinstance(old, dict) or not isinstance(new, dict):
        raise PolicyError("Both 'old' and 'new' must be JSON objects")
    return jsonify({"changes": [asdict(c) for c in diff_fields(old, new)]})


@app.post("/api/upload")
def api_upload():
    global tenders
    upload = request.files.get("file")
    if upload is None:
        return jsonify({"error": "No file uploaded (field name: 'file')"}), 400

    try:
        batch, stats = read_tenders(io.BytesIO(upload.read()))
    except Exception as exc:
        log.error("Could not read workbook %s: %s", upload.filename, exc)
        return jsonify({"error": f"Could not read workbook: {exc}"}), 400

    with _lock:
        known = {t.tender_id: t for t in tenders if not t.is_corrigendum}
        process_tenders(batch, profile.policy, profile.negative_keywords, known=known)
        tenders = tenders + batch

    return jsonify({
        "gem_count": stats.gem_count,
        "non_gem_count": stats.non_gem_count,
        "failed_count": stats.failed_count,
        "corrigendum_count": sum(1 for t in batch if t.is_corrigendum),
    })


@app.get("/api/tenders")
def api_tenders():
    status = request.args.get("status")
    with _lock:
        rows = [
            _to_dict(t) for t in tenders
            if status is None or (t.match and t.match.eligibility_status.value == status)
        ]
    return jsonify(rows)


@app.post("/api/tenders/<path:tender_id>/documents")
def api_add_document(tender_id):
    """Append text from a supplemental document to the eligibility criteria and re-score."""
    body = _json_body()
    text = str(body.get("text") or "").strip()
    if not text:
        raise PolicyError("'text' must be a non-empty string")

    with _lock:
        tender = next((t for t in reversed(tenders) if t.tender_id == tender_id), None)
        if tender is None:
            return jsonify({"error": f"Unknown tender: {tender_id}"}), 404
        tender.eligibility_criteria = (
            f"{tender.eligibility_criteria}\n{text}" if tender.eligibility_criteria else text
        )
        tender.match = analyze_tender(tender, profile.policy, profile.negative_keywords)
        row = _to_dict(tender)

    log.info("Tender %s re-analysed after document upload: %s",
             tender_id, row["match"]["eligibility_status"])
    return jsonify(row)


# ── Settings ──────────────────────────────────────────────────────────────────

@app.get("/api/settings")
def api_get_settings():
    """Return current my_profile.yaml settings as JSON."""
    with open(_PROFILE_FILE, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return jsonify({
        "company_name":        data.get("company_name", ""),
        "turnover_lakhs":      data.get("turnover_lakhs", 400),
        "project_types":       data.get("project_types", []),
        "negative_keywords":   data.get("negative_keywords", []),
        "minimum_match_score": data.get("minimum_match_score", 30),
    })


@app.post("/api/settings")
def api_save_settings():
    """Validate, write my_profile.yaml, and re-analyse every stored tender."""
    global profile
    body = _json_body()

    with open(_PROFILE_FILE, encoding="utf-8") as f:
        existing = yaml.safe_load(f) or {}

    new_data = {
        "company_name":        body.get("company_name", existing.get("company_name", "Company")),
        "turnover_lakhs":      body.get("turnover_lakhs", existing.get("turnover_lakhs", 400)),
        "project_types":       body.get("project_types", existing.get("project_types")),
        "negative_keywords":   body.get("negative_keywords", existing.get("negative_keywords", [])),
        "minimum_match_score": body.get("minimum_match_score", existing.get("minimum_match_score", 30)),
        "output_dir":          existing.get("output_dir", "reports"),
    }
    new_profile = config.parse_profile(new_data)   # PolicyError -> 400

    try:
        with open(_PROFILE_FILE, "w", encoding="utf-8") as f:
            yaml.dump(new_data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
    except OSError as exc:
        return jsonify({"error": f"Could not write profile: {exc}"}), 500

    with _lock:
        profile = new_profile
        outcome = reanalyze_all(tenders, profile.policy, profile.negative_keywords)

    return jsonify({
        "status": "saved",
        "reanalyzed": outcome.scored,
        "failed": len(outcome.failures),
    })


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5000, debug=False)
