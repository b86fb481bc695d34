"""
Dashboard Service - turns a stored analysis into tab read models.

Tabs:
- score:     overall score band, eligibility and match-rate summaries
- gap:       skill gaps (first company) and the ones below requirement
- companies: one card per matched company
- plan:      the action plan

Every number shown here comes from the AI payload or the profile row;
the only local arithmetic is counting and percentages for the summaries.
"""

from typing import Optional, List

from app.schemas.schemas import (
    StudentSummary, SkillGap, CompanyMatch, ActionItem, Resource, ScoreTab, GapTab,
    CompaniesTab, PlanTab, DashboardResponse, CompanyDetailResponse,
    EligibilityCriterion, Recommendation, RecommendationResource
)

EXCELLENT_SCORE = 80
GOOD_SCORE = 60
ELIGIBLE_CGPA = 7.5
STRONG_MATCH_PERCENTAGE = 70
DEFAULT_ROLE = "Software Engineer"
INTERVIEW_EXPERIENCE_URL = "https://www.geeksforgeeks.org/companies/{slug}/articles/"


def score_color(score: float) -> str:
    if score >= EXCELLENT_SCORE:
        return "green"
    if score >= GOOD_SCORE:
        return "yellow"
    return "red"


def score_text(score: float) -> str:
    if score >= EXCELLENT_SCORE:
        return "Excellent"
    if score >= GOOD_SCORE:
        return "Good"
    return "Needs Improvement"


def interview_experience_url(company_name: str) -> str:
    slug = "".join(company_name.lower().split())
    return INTERVIEW_EXPERIENCE_URL.format(slug=slug)


def _skill_gaps(raw: List[dict]) -> List[SkillGap]:
    return [
        SkillGap(
            skill=g["skill"],
            student_level=g["studentLevel"],
            required_level=g["requiredLevel"],
            gap=g.get("gap", g["requiredLevel"] - g["studentLevel"]),
        )
        for g in raw
    ]


def build_student_summary(profile: Optional[dict], name: str) -> StudentSummary:
    profile = profile or {}
    return StudentSummary(
        name=name or "Student",
        cgpa=profile.get("cgpa") or 0,
        branch=profile.get("branch") or "",
        backlogs=profile.get("backlogs") or 0,
        tenth_percentage=profile.get("tenth_percentage") or 0,
        twelfth_percentage=profile.get("twelfth_percentage") or 0,
        codolio_profile=profile.get("codolio_profile"),
    )


def build_score_tab(analysis_data: dict, student: StudentSummary) -> ScoreTab:
    overall = analysis_data.get("overallScore") or 0
    companies = analysis_data.get("companies") or []
    gaps = companies[0].get("skillGaps", []) if companies else []

    below = [g for g in gaps if g["studentLevel"] < g["requiredLevel"]]
    skills_met = 100 - (len(below) / len(gaps) * 100) if gaps else 100.0

    matched = [c for c in companies if c["matchPercentage"] >= STRONG_MATCH_PERCENTAGE]
    match_rate = len(matched) / len(companies) * 100 if companies else 0.0

    return ScoreTab(
        overall_score=overall,
        score_color=score_color(overall),
        score_text=score_text(overall),
        academic_status="Eligible" if student.cgpa >= ELIGIBLE_CGPA else "Not Eligible",
        technical_status="Gaps Identified" if gaps else "All Skills Met",
        skills_met_percentage=skills_met,
        companies_matched=len(matched),
        companies_total=len(companies),
        company_match_rate=match_rate,
        student=student,
    )


def build_gap_tab(analysis_data: dict) -> GapTab:
    companies = analysis_data.get("companies") or []
    gaps = _skill_gaps(companies[0].get("skillGaps", []) if companies else [])
    return GapTab(
        skill_gaps=gaps,
        focus_areas=[g for g in gaps if g.student_level < g.required_level],
    )


def build_companies_tab(analysis_data: dict) -> CompaniesTab:
    return CompaniesTab(companies=[
        CompanyMatch(
            name=c["name"],
            role=c.get("role") or DEFAULT_ROLE,
            match_percentage=c["matchPercentage"],
            description=c.get("description") or "",
        )
        for c in analysis_data.get("companies") or []
    ])


def build_plan_tab(analysis_data: dict) -> PlanTab:
    return PlanTab(action_plan=[
        ActionItem(
            action=item["action"],
            timeline=item.get("timeline") or "",
            resources=[Resource(name=r["name"], url=r["url"]) for r in item.get("resources", [])],
        )
        for item in analysis_data.get("actionPlan") or []
    ])


def build_dashboard(analysis: dict, profile: Optional[dict], student_name: str) -> DashboardResponse:
    """Full dashboard for a stored analysis row."""
    data = analysis["analysis_data"]
    student = build_student_summary(profile, student_name)
    return DashboardResponse(
        analysis_id=analysis["analysis_id"],
        created_at=analysis["created_at"],
        score=build_score_tab(data, student),
        gap=build_gap_tab(data),
        companies=build_companies_tab(data),
        plan=build_plan_tab(data),
    )


def find_company(analysis_data: dict, company_name: str) -> Optional[dict]:
    """Case-insensitive lookup by company name."""
    wanted = company_name.strip().lower()
    for company in analysis_data.get("companies") or []:
        if company["name"].lower() == wanted:
            return company
    return None


def build_company_detail(company: dict) -> CompanyDetailResponse:
    return CompanyDetailResponse(
        name=company["name"],
        match_percentage=company["matchPercentage"],
        description=company.get("description") or "",
        strength_areas=company.get("strengthAreas", []),
        improvement_areas=company.get("improvementAreas", []),
        skills=_skill_gaps(company.get("skillGaps", [])),
        eligibility_criteria=[
            EligibilityCriterion(
                name=c["name"],
                student_value=c.get("studentValue"),
                required_value=c.get("requiredValue"),
                is_met=c["isMet"],
            )
            for c in company.get("eligibilityCriteria", [])
        ],
        recommendations=[
            Recommendation(
                title=r["title"],
                description=r.get("description") or "",
                priority=r.get("priority") or "medium",
                resources=[RecommendationResource(title=res["title"], link=res["link"]) for res in r.get("resources", [])],
            )
            for r in company.get("recommendations", [])
        ],
        interview_experience_url=interview_experience_url(company["name"]),
    )
