"""
Profile & Analysis persistence.

Maps between the form-shaped profile used by the intake draft
(academic_details / codolio_profile / self_assessment) and the storage
rows of the profiles and analyses tables.
"""

import json
import logging
from datetime import datetime
from typing import Optional, List, Any

from sqlalchemy import text

from app.db.postgres import get_db_session

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = [
    "profile_id", "user_id", "cgpa", "tenth_percentage", "twelfth_percentage",
    "backlogs", "branch", "codolio_profile", "technical_skills_rating",
    "personal_reflection", "created_at", "updated_at",
]

ANALYSIS_COLUMNS = [
    "analysis_id", "user_id", "profile_id", "overall_score", "analysis_data", "created_at",
]


# ============================================================
# FORM <-> ROW MAPPING
# ============================================================

def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def form_to_row(form: dict, user_id: int) -> dict:
    """Convert the intake form fields into a profiles row."""
    academic = form.get("academic_details") or {}
    assessment = form.get("self_assessment") or {}

    return {
        "user_id": user_id,
        "cgpa": _to_float(academic.get("cgpa")),
        "tenth_percentage": _to_float(academic.get("tenth_percentage")),
        "twelfth_percentage": _to_float(academic.get("twelfth_percentage")),
        "backlogs": _to_int(academic.get("backlogs")) or 0,
        "branch": (academic.get("branch") or "").strip() or None,
        "codolio_profile": (form.get("codolio_profile") or "").strip() or None,
        # An unrated self-assessment is stored as 0
        "technical_skills_rating": _to_int(assessment.get("technical_skills")) or 0,
        "personal_reflection": assessment.get("personal_reflection") or None,
        "updated_at": datetime.utcnow(),
    }


def row_to_form(row: dict) -> dict:
    """Convert a profiles row back into intake form fields (for prefill)."""
    return {
        "academic_details": {
            "cgpa": _to_float(row.get("cgpa")),
            "tenth_percentage": _to_float(row.get("tenth_percentage")),
            "twelfth_percentage": _to_float(row.get("twelfth_percentage")),
            "backlogs": _to_int(row.get("backlogs")) or 0,
            "branch": row.get("branch"),
        },
        "codolio_profile": row.get("codolio_profile") or "",
        "self_assessment": {
            "technical_skills": row.get("technical_skills_rating") or None,
            "personal_reflection": row.get("personal_reflection"),
        },
    }


def _profile_from_row(row) -> dict:
    data = dict(zip(PROFILE_COLUMNS, row))
    for field in ("cgpa", "tenth_percentage", "twelfth_percentage"):
        data[field] = _to_float(data[field])
    return data


def _analysis_from_row(row) -> dict:
    data = dict(zip(ANALYSIS_COLUMNS, row))
    data["overall_score"] = _to_float(data["overall_score"]) or 0.0
    raw = data["analysis_data"]
    data["analysis_data"] = json.loads(raw) if isinstance(raw, str) else raw
    return data


# ============================================================
# PROFILE OPERATIONS
# ============================================================

def save_profile(form: dict, user_id: int) -> dict:
    """Upsert the user's profile (one row per user) and return the stored row."""
    row = form_to_row(form, user_id)

    with get_db_session() as db:
        result = db.execute(
            text("""
                INSERT INTO profiles (user_id, cgpa, tenth_percentage, twelfth_percentage, backlogs,
                                      branch, codolio_profile, technical_skills_rating,
                                      personal_reflection, created_at, updated_at)
                VALUES (:user_id, :cgpa, :tenth_percentage, :twelfth_percentage, :backlogs,
                        :branch, :codolio_profile, :technical_skills_rating,
                        :personal_reflection, :updated_at, :updated_at)
                ON CONFLICT (user_id) DO UPDATE SET
                    cgpa = EXCLUDED.cgpa,
                    tenth_percentage = EXCLUDED.tenth_percentage,
                    twelfth_percentage = EXCLUDED.twelfth_percentage,
                    backlogs = EXCLUDED.backlogs,
                    branch = EXCLUDED.branch,
                    codolio_profile = EXCLUDED.codolio_profile,
                    technical_skills_rating = EXCLUDED.technical_skills_rating,
                    personal_reflection = EXCLUDED.personal_reflection,
                    updated_at = EXCLUDED.updated_at
                RETURNING {columns}
            """.format(columns=", ".join(PROFILE_COLUMNS))),
            row
        )
        profile = _profile_from_row(result.fetchone())

    logger.info("Saved profile %s for user %s", profile["profile_id"], user_id)
    return profile


def get_profile(user_id: int) -> Optional[dict]:
    """Fetch the user's profile row, None if the user never submitted."""
    with get_db_session() as db:
        result = db.execute(
            text(f"SELECT {', '.join(PROFILE_COLUMNS)} FROM profiles WHERE user_id = :id"),
            {"id": user_id}
        )
        row = result.fetchone()
    return _profile_from_row(row) if row else None


# ============================================================
# ANALYSIS OPERATIONS
# ============================================================

def save_analysis(analysis: dict, user_id: int, profile_id: int) -> dict:
    """Insert an analysis row; overall_score falls back to 0."""
    created_at = datetime.utcnow()
    overall_score = _to_float(analysis.get("overallScore")) or 0

    with get_db_session() as db:
        result = db.execute(
            text("""
                INSERT INTO analyses (user_id, profile_id, overall_score, analysis_data, created_at)
                VALUES (:user_id, :profile_id, :overall_score, :analysis_data, :created_at)
                RETURNING {columns}
            """.format(columns=", ".join(ANALYSIS_COLUMNS))),
            {
                "user_id": user_id,
                "profile_id": profile_id,
                "overall_score": overall_score,
                "analysis_data": json.dumps(analysis),
                "created_at": created_at,
            }
        )
        saved = _analysis_from_row(result.fetchone())

    logger.info("Saved analysis %s for user %s (score %s)", saved["analysis_id"], user_id, overall_score)
    return saved


def get_latest_analysis(user_id: int) -> Optional[dict]:
    """Most recent analysis for a user, None if there is none."""
    analyses = list_analyses(user_id, limit=1)
    return analyses[0] if analyses else None


def list_analyses(user_id: int, limit: int = 20) -> List[dict]:
    """User's analyses, newest first."""
    with get_db_session() as db:
        result = db.execute(
            text(f"""
                SELECT {', '.join(ANALYSIS_COLUMNS)} FROM analyses
                WHERE user_id = :id
                ORDER BY created_at DESC, analysis_id DESC
                LIMIT :limit
            """),
            {"id": user_id, "limit": limit}
        )
        rows = result.fetchall()
    return [_analysis_from_row(row) for row in rows]
