"""
Intake Routes

GET /intake - Current draft (prefilled from the stored profile)
PUT /intake/academic - Save academic details
PUT /intake/codolio - Save profile-aggregator URL
POST /intake/resume - Upload resume (PDF/DOCX/TXT)
POST /intake/company-requirements - Upload company requirements document
PUT /intake/job-description - Save job description text
PUT /intake/assessment - Save self-assessment
POST /intake/navigate - Move to any step
GET /intake/formats - Supported upload formats
DELETE /intake - Discard the draft
POST /intake/submit - Run the analysis pipeline
"""

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File

from app.core.auth import get_current_user
from app.utils.file_upload import extract_text_from_file, get_supported_formats
from app.services.intake_service import IntakeForm, IntakeService, get_intake_service
from app.services.analysis_service import AnalysisPipeline, get_analysis_pipeline
from app.services.dashboard_service import build_dashboard
from app.schemas.schemas import (
    AcademicDetails, CodolioUpdate, SelfAssessment, JobDescriptionText,
    NavigateRequest, IntakeState, SubmitResponse
)

router = APIRouter(prefix="/intake", tags=["Intake"])


def _state(form: IntakeForm) -> IntakeState:
    return IntakeState(**form.state())


@router.get("", response_model=IntakeState)
async def get_draft(
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    """Current intake state with completion flags and progress."""
    return _state(intake.load(user["user_id"]))


@router.put("/academic", response_model=IntakeState)
async def save_academic(
    data: AcademicDetails,
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    form = intake.load(user["user_id"])
    form.set_academic(data.model_dump())
    return _state(intake.save(user["user_id"], form))


@router.put("/codolio", response_model=IntakeState)
async def save_codolio(
    data: CodolioUpdate,
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    form = intake.load(user["user_id"])
    form.set_codolio(data.codolio_profile)
    return _state(intake.save(user["user_id"], form))


@router.post("/resume", response_model=IntakeState)
async def upload_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, or TXT)"),
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    """Extract resume text and attach it to the draft."""
    resume_text, filename = await extract_text_from_file(file)
    form = intake.load(user["user_id"])
    form = intake.attach_document(user["user_id"], form, "resume", resume_text, filename)
    return _state(form)


@router.post("/company-requirements", response_model=IntakeState)
async def upload_company_requirements(
    file: UploadFile = File(..., description="Company requirements (PDF, DOCX, or TXT)"),
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    """Attach a requirements document; clears any typed job description."""
    requirements_text, filename = await extract_text_from_file(file)
    form = intake.load(user["user_id"])
    form = intake.attach_document(user["user_id"], form, "company_requirements", requirements_text, filename)
    return _state(form)


@router.put("/job-description", response_model=IntakeState)
async def save_job_description(
    data: JobDescriptionText,
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    """Typed job description; non-blank text clears an uploaded requirements file."""
    form = intake.load(user["user_id"])
    form.set_job_description_text(data.job_description_text)
    return _state(intake.save(user["user_id"], form))


@router.put("/assessment", response_model=IntakeState)
async def save_assessment(
    data: SelfAssessment,
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    form = intake.load(user["user_id"])
    form.set_self_assessment(data.model_dump())
    return _state(intake.save(user["user_id"], form))


@router.post("/navigate", response_model=IntakeState)
async def navigate(
    data: NavigateRequest,
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    form = intake.load(user["user_id"])
    form.navigate(data.step.value)
    return _state(intake.save(user["user_id"], form))


@router.get("/formats")
async def upload_formats():
    """Get supported upload formats."""
    return get_supported_formats()


@router.delete("", response_model=IntakeState)
async def reset_draft(
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service)
):
    """Discard the draft and start again from the stored profile."""
    return _state(intake.reset(user["user_id"]))


@router.post("/submit", response_model=SubmitResponse)
def submit(
    user: dict = Depends(get_current_user),
    intake: IntakeService = Depends(get_intake_service),
    pipeline: AnalysisPipeline = Depends(get_analysis_pipeline)
):
    """
    Analyze the completed profile with AI.

    Plain def: the AI call blocks, so FastAPI runs this in its threadpool.

    Process:
    1. Save profile
    2. AI analysis of profile + resume + requirements
    3. Save analysis
    4. Return the dashboard
    """
    form = intake.load(user["user_id"])
    if not form.is_complete:
        raise HTTPException(
            status_code=400,
            detail=f"Complete all sections before submitting. Missing: {', '.join(form.missing_steps)}"
        )

    result = pipeline.run(user["user_id"], form)

    if not result["success"]:
        raise HTTPException(status_code=502, detail=result["error"])

    analysis = result["analysis"]
    return SubmitResponse(
        profile_id=result["profile"]["profile_id"],
        analysis_id=analysis["analysis_id"],
        dashboard=build_dashboard(analysis, result["profile"], user["full_name"]),
    )
