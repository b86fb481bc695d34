"""
Analysis Pipeline - profile submission -> AI analysis -> persistence.

Linear chain, run once per submit:
1. Upsert the profile row
2. Send profile + documents to the AI model with the fixed prompt
3. Validate/sanitize the returned JSON
4. Insert the analysis row
5. Close the intake draft

No retries and no rollback: if step 2 fails the profile upsert from step 1
stays. Failures come back in the result dict as a display message.
"""

import logging
import math
from datetime import datetime
from typing import Any, List

from app.services.ai_client import get_ai_client, GenerativeAIClient
from app.services.intake_service import IntakeForm, IntakeService
from app.services.profile_service import save_profile, save_analysis

logger = logging.getLogger(__name__)

PRIORITIES = ("high", "medium", "low")

FALSE_STRINGS = ("false", "no", "0", "")

FAILURE_PREFIX = "Failed to analyze profile with AI: "


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def _clamp_number(value: Any, low: float, high: float, default: float) -> float:
    try:
        number = float(value)
    except (ValueError, TypeError):
        return default
    if not math.isfinite(number):
        return default
    return max(low, min(high, number))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip()


def _strings(value: Any) -> List[str]:
    return [str(item).strip() for item in _as_list(value) if item]


def _validate_skill_gap(data: dict) -> dict:
    student_level = int(round(_clamp_number(data.get("studentLevel"), 1, 10, 1)))
    required_level = int(round(_clamp_number(data.get("requiredLevel"), 1, 10, 1)))
    try:
        gap = int(round(float(data.get("gap"))))
    except (ValueError, TypeError, OverflowError):
        gap = required_level - student_level
    return {
        "skill": _as_str(data.get("skill")) or "Unnamed skill",
        "studentLevel": student_level,
        "requiredLevel": required_level,
        "gap": gap,
    }


def _validate_recommendation(data: dict) -> dict:
    priority = _as_str(data.get("priority")).lower()
    return {
        "title": _as_str(data.get("title")) or "Recommendation",
        "description": _as_str(data.get("description")),
        "priority": priority if priority in PRIORITIES else "medium",
        "resources": [
            {"title": _as_str(r.get("title")) or _as_str(r.get("link")), "link": _as_str(r.get("link"))}
            for r in _as_list(data.get("resources")) if isinstance(r, dict)
        ],
    }


def _validate_company(data: dict) -> dict:
    return {
        "name": _as_str(data.get("name")) or "Unknown Company",
        "matchPercentage": _clamp_number(data.get("matchPercentage"), 0, 100, 0),
        "description": _as_str(data.get("description")),
        "role": _as_str(data.get("role")) or None,
        "eligibilityCriteria": [
            {
                "name": _as_str(c.get("name")),
                "studentValue": c.get("studentValue"),
                "requiredValue": c.get("requiredValue"),
                "isMet": _as_bool(c.get("isMet")),
            }
            for c in _as_list(data.get("eligibilityCriteria")) if isinstance(c, dict)
        ],
        "skillGaps": [
            _validate_skill_gap(g) for g in _as_list(data.get("skillGaps")) if isinstance(g, dict)
        ],
        "recommendations": [
            _validate_recommendation(r) for r in _as_list(data.get("recommendations")) if isinstance(r, dict)
        ],
        "strengthAreas": _strings(data.get("strengthAreas")),
        "improvementAreas": _strings(data.get("improvementAreas")),
    }


def validate_analysis(data: dict) -> dict:
    """
    Validate and sanitize the AI analysis payload.
    Keeps the model's camelCase keys; every field exists with the right type.
    """
    return {
        "overallScore": _clamp_number(data.get("overallScore"), 0, 100, 0),
        "companies": [
            _validate_company(c) for c in _as_list(data.get("companies")) if isinstance(c, dict)
        ],
        "actionPlan": [
            {
                "action": _as_str(item.get("action")),
                "timeline": _as_str(item.get("timeline")),
                "resources": [
                    {"name": _as_str(r.get("name")) or _as_str(r.get("url")), "url": _as_str(r.get("url"))}
                    for r in _as_list(item.get("resources")) if isinstance(r, dict)
                ],
            }
            for item in _as_list(data.get("actionPlan")) if isinstance(item, dict) and item.get("action")
        ],
    }


# ============================================================
# PIPELINE
# ============================================================

class AnalysisPipeline:
    """
    Complete submission workflow:
    1. Save profile row
    2. Analyze with the AI model
    3. Validate JSON output
    4. Save analysis row
    5. Close the draft
    """

    def __init__(self, ai_client: GenerativeAIClient = None, intake: IntakeService = None):
        # Resolved on first run so a missing API key surfaces as a pipeline error
        self.ai_client = ai_client
        self.intake = intake or IntakeService()

    def run(self, user_id: int, form: IntakeForm) -> dict:
        """
        Run the pipeline for a complete form.

        Returns:
            {
                "success": True/False,
                "profile": {...},
                "analysis": {...},   # stored analysis row
                "error": None or display message
            }
        """
        result = {
            "success": False,
            "profile": None,
            "analysis": None,
            "error": None
        }

        try:
            # Step 1: Save profile
            profile = save_profile(form.draft, user_id)
            result["profile"] = profile

            # Step 2: Analyze with AI
            resume_text = self.intake.document_text(user_id, form.draft.get("resume"))
            requirements_text = (
                self.intake.document_text(user_id, form.draft.get("company_requirements"))
                or form.draft.get("job_description_text")
            )
            ai_client = self.ai_client or get_ai_client()
            raw_analysis = ai_client.analyze_profile(profile, resume_text, requirements_text)

            # Step 3: Validate
            analysis = validate_analysis(raw_analysis)

            # Step 4: Save analysis
            result["analysis"] = save_analysis(analysis, user_id, profile["profile_id"])

            # Step 5: Close the draft
            self.intake.mark_submitted(user_id, form, datetime.utcnow())

            result["success"] = True

        except Exception as e:
            logger.exception("Analysis pipeline failed for user %s", user_id)
            result["error"] = FAILURE_PREFIX + str(e)

        return result


def get_analysis_pipeline() -> AnalysisPipeline:
    """Get analysis pipeline instance."""
    return AnalysisPipeline()
