"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class IntakeStep(str, Enum):
    academic = "academic"
    codolio = "codolio"
    resume = "resume"
    company = "company"
    assessment = "assessment"


class DashboardTab(str, Enum):
    score = "score"
    gap = "gap"
    companies = "companies"
    plan = "plan"


class Priority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    full_name: Optional[str] = Field(None, max_length=200)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    full_name: Optional[str] = None

class UserResponse(BaseModel):
    user_id: int
    email: str
    full_name: Optional[str] = None
    created_at: datetime

class SessionResponse(BaseModel):
    authenticated: bool
    user: Optional[UserResponse] = None


# ============================================================
# INTAKE SCHEMAS
# ============================================================

class AcademicDetails(BaseModel):
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    tenth_percentage: Optional[float] = Field(None, ge=0, le=100)
    twelfth_percentage: Optional[float] = Field(None, ge=0, le=100)
    backlogs: int = Field(0, ge=0)
    branch: Optional[str] = Field(None, max_length=100)

class CodolioUpdate(BaseModel):
    codolio_profile: str = ""

class SelfAssessment(BaseModel):
    technical_skills: Optional[int] = Field(None, ge=1, le=10)
    personal_reflection: Optional[str] = None

class JobDescriptionText(BaseModel):
    job_description_text: str = ""

class NavigateRequest(BaseModel):
    step: IntakeStep

class AttachedDocument(BaseModel):
    document_id: str
    filename: str
    characters: int

class IntakeState(BaseModel):
    academic_details: AcademicDetails
    codolio_profile: str = ""
    resume: Optional[AttachedDocument] = None
    company_requirements: Optional[AttachedDocument] = None
    job_description_text: str = ""
    self_assessment: SelfAssessment
    completed_steps: Dict[str, bool]
    active_step: IntakeStep
    progress: float
    is_complete: bool
    missing_steps: List[str] = []
    updated_at: Optional[datetime] = None


# ============================================================
# PROFILE / ANALYSIS SCHEMAS
# ============================================================

class ProfileResponse(BaseModel):
    profile_id: int
    user_id: int
    cgpa: Optional[float] = None
    tenth_percentage: Optional[float] = None
    twelfth_percentage: Optional[float] = None
    backlogs: int = 0
    branch: Optional[str] = None
    codolio_profile: Optional[str] = None
    technical_skills_rating: Optional[int] = None
    personal_reflection: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class AnalysisResponse(BaseModel):
    analysis_id: int
    user_id: int
    profile_id: int
    overall_score: float
    analysis_data: Dict[str, Any]
    created_at: datetime


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class StudentSummary(BaseModel):
    name: str
    cgpa: float = 0
    branch: str = ""
    backlogs: int = 0
    tenth_percentage: float = 0
    twelfth_percentage: float = 0
    codolio_profile: Optional[str] = None

class SkillGap(BaseModel):
    skill: str
    student_level: int
    required_level: int
    gap: int

class CompanyMatch(BaseModel):
    name: str
    role: str = "Software Engineer"
    match_percentage: float
    description: str = ""

class Resource(BaseModel):
    name: str
    url: str

class ActionItem(BaseModel):
    action: str
    timeline: str = ""
    resources: List[Resource] = []

class ScoreTab(BaseModel):
    overall_score: float
    score_color: str
    score_text: str
    academic_status: str
    technical_status: str
    skills_met_percentage: float
    companies_matched: int
    companies_total: int
    company_match_rate: float
    student: StudentSummary

class GapTab(BaseModel):
    skill_gaps: List[SkillGap]
    focus_areas: List[SkillGap]

class CompaniesTab(BaseModel):
    companies: List[CompanyMatch]

class PlanTab(BaseModel):
    action_plan: List[ActionItem]

class DashboardResponse(BaseModel):
    analysis_id: int
    created_at: datetime
    tabs: List[DashboardTab] = list(DashboardTab)
    score: ScoreTab
    gap: GapTab
    companies: CompaniesTab
    plan: PlanTab

class EligibilityCriterion(BaseModel):
    name: str
    student_value: Any = None
    required_value: Any = None
    is_met: bool

class RecommendationResource(BaseModel):
    title: str
    link: str

class Recommendation(BaseModel):
    title: str
    description: str = ""
    priority: Priority = Priority.medium
    resources: List[RecommendationResource] = []

class CompanyDetailResponse(BaseModel):
    name: str
    match_percentage: float
    description: str = ""
    strength_areas: List[str] = []
    improvement_areas: List[str] = []
    skills: List[SkillGap] = []
    eligibility_criteria: List[EligibilityCriterion] = []
    recommendations: List[Recommendation] = []
    interview_experience_url: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class SubmitResponse(BaseModel):
    success: bool = True
    profile_id: int
    analysis_id: int
    dashboard: DashboardResponse
