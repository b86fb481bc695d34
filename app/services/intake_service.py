"""
Intake Service - multi-step profile form.

Steps, in order:
    academic -> codolio -> resume -> company -> assessment

Each save re-validates its step. A valid step is marked complete and the
form moves to the next step; an invalid one is marked incomplete and the
form stays put. Submission is allowed only when every step is complete.

IntakeForm is pure state (no I/O) so the rules can be tested directly.
IntakeService loads/stores drafts in MongoDB and archives uploads.
"""

import copy
import logging
from typing import Optional, List, Dict

from app.services.document_service import DraftService, RawDocumentService
from app.services.profile_service import get_profile, row_to_form

logger = logging.getLogger(__name__)

STEPS: List[str] = ["academic", "codolio", "resume", "company", "assessment"]


def empty_draft() -> dict:
    return {
        "academic_details": {
            "cgpa": None,
            "tenth_percentage": None,
            "twelfth_percentage": None,
            "backlogs": 0,
            "branch": None,
        },
        "codolio_profile": "",
        "resume": None,
        "company_requirements": None,
        "job_description_text": "",
        "self_assessment": {
            "technical_skills": None,
            "personal_reflection": None,
        },
        "completed_steps": {step: False for step in STEPS},
        "active_step": STEPS[0],
        "submitted_at": None,
    }


class IntakeForm:
    """State machine over a draft dict."""

    def __init__(self, draft: dict = None):
        self.draft = copy.deepcopy(draft) if draft else empty_draft()

    @classmethod
    def from_profile(cls, profile_row: dict) -> "IntakeForm":
        """
        Prefill from a stored profile.
        academic and assessment start complete, codolio only if a URL was
        stored; documents always have to be attached again.
        """
        form = cls()
        form.draft.update(row_to_form(profile_row))
        form.draft["completed_steps"].update({
            "academic": True,
            "codolio": bool(form.draft["codolio_profile"]),
            "assessment": True,
        })
        return form

    # ---------------- derived state ----------------

    @property
    def completed_steps(self) -> Dict[str, bool]:
        return self.draft["completed_steps"]

    @property
    def active_step(self) -> str:
        return self.draft["active_step"]

    @property
    def progress(self) -> float:
        completed = sum(1 for step in STEPS if self.completed_steps.get(step))
        return completed / len(STEPS) * 100

    @property
    def missing_steps(self) -> List[str]:
        return [step for step in STEPS if not self.completed_steps.get(step)]

    @property
    def is_complete(self) -> bool:
        return not self.missing_steps

    def state(self) -> dict:
        """Draft plus derived fields, shaped like IntakeState."""
        state = {key: value for key, value in self.draft.items() if key not in ("user_id", "submitted_at")}
        state.update({
            "progress": self.progress,
            "is_complete": self.is_complete,
            "missing_steps": self.missing_steps,
        })
        return state

    # ---------------- validation ----------------

    def is_step_valid(self, step: str) -> bool:
        if step == "academic":
            academic = self.draft["academic_details"]
            return (
                academic.get("cgpa") is not None
                and academic.get("tenth_percentage") is not None
                and academic.get("twelfth_percentage") is not None
                and bool((academic.get("branch") or "").strip())
            )
        if step == "codolio":
            return bool(self.draft["codolio_profile"].strip())
        if step == "resume":
            return self.draft["resume"] is not None
        if step == "company":
            return (
                self.draft["company_requirements"] is not None
                or bool(self.draft["job_description_text"].strip())
            )
        if step == "assessment":
            # Optional step
            return True
        raise ValueError(f"Unknown intake step: {step}")

    def validate_step(self, step: str) -> bool:
        """Record the step's completion and advance if it is valid."""
        valid = self.is_step_valid(step)
        self.completed_steps[step] = valid
        if valid:
            index = STEPS.index(step)
            if index + 1 < len(STEPS):
                self.draft["active_step"] = STEPS[index + 1]
        return valid

    def navigate(self, step: str) -> None:
        if step not in STEPS:
            raise ValueError(f"Unknown intake step: {step}")
        self.draft["active_step"] = step

    # ---------------- field updates ----------------

    def set_academic(self, academic: dict) -> bool:
        self.draft["academic_details"] = dict(academic)
        return self.validate_step("academic")

    def set_codolio(self, url: str) -> bool:
        self.draft["codolio_profile"] = url or ""
        return self.validate_step("codolio")

    def attach_resume(self, document: dict) -> bool:
        self.draft["resume"] = document
        return self.validate_step("resume")

    def attach_company_requirements(self, document: dict) -> bool:
        """A requirements file replaces any typed job description."""
        self.draft["company_requirements"] = document
        self.draft["job_description_text"] = ""
        return self.validate_step("company")

    def set_job_description_text(self, jd_text: str) -> bool:
        """Non-blank text replaces any uploaded requirements file."""
        jd_text = jd_text or ""
        self.draft["job_description_text"] = jd_text
        if jd_text.strip():
            self.draft["company_requirements"] = None
        return self.validate_step("company")

    def set_self_assessment(self, assessment: dict) -> bool:
        self.draft["self_assessment"] = dict(assessment)
        return self.validate_step("assessment")


class IntakeService:
    """Draft persistence + document archiving around IntakeForm."""

    def __init__(self):
        self.drafts = DraftService()
        self.documents = RawDocumentService()

    def load(self, user_id: int) -> IntakeForm:
        """Current draft, or a new one prefilled from the stored profile."""
        draft = self.drafts.get(user_id)
        if draft and not draft.get("submitted_at"):
            return IntakeForm(draft)

        profile = get_profile(user_id)
        if profile:
            return IntakeForm.from_profile(profile)
        return IntakeForm()

    def save(self, user_id: int, form: IntakeForm) -> IntakeForm:
        form.draft = self.drafts.save(user_id, form.draft)
        return form

    def reset(self, user_id: int) -> IntakeForm:
        self.drafts.delete(user_id)
        return self.load(user_id)

    def attach_document(self, user_id: int, form: IntakeForm, kind: str, text: str, filename: str) -> IntakeForm:
        """Archive an uploaded document and reference it from the draft."""
        document_id = self.documents.insert(user_id=user_id, kind=kind, text=text, filename=filename)
        reference = {"document_id": document_id, "filename": filename, "characters": len(text)}
        if kind == "resume":
            form.attach_resume(reference)
        else:
            form.attach_company_requirements(reference)
        logger.info("User %s attached %s '%s' (%d chars)", user_id, kind, filename, len(text))
        return self.save(user_id, form)

    def document_text(self, user_id: int, reference: Optional[dict]) -> Optional[str]:
        if not reference:
            return None
        return self.documents.get_text(reference["document_id"], user_id=user_id)

    def mark_submitted(self, user_id: int, form: IntakeForm, submitted_at) -> None:
        form.draft["submitted_at"] = submitted_at
        self.save(user_id, form)


def get_intake_service() -> IntakeService:
    """Get intake service instance."""
    return IntakeService()
