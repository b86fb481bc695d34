"""
Dashboard Routes

GET /dashboard - All tabs for the latest analysis
GET /dashboard/tabs/{tab} - One tab (score, gap, companies, plan)
GET /dashboard/companies/{company_name} - Company match detail
"""

from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import get_current_user
from app.services.profile_service import get_latest_analysis, get_profile
from app.services.dashboard_service import build_dashboard, find_company, build_company_detail
from app.schemas.schemas import DashboardResponse, DashboardTab, CompanyDetailResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

NO_ANALYSIS = "Submit your profile to see the analysis"


def _latest_or_404(user_id: int) -> dict:
    analysis = get_latest_analysis(user_id)
    if not analysis:
        raise HTTPException(status_code=404, detail=NO_ANALYSIS)
    return analysis


@router.get("", response_model=DashboardResponse)
async def get_dashboard(user: dict = Depends(get_current_user)):
    """Readiness dashboard built from the latest analysis."""
    analysis = _latest_or_404(user["user_id"])
    return build_dashboard(analysis, get_profile(user["user_id"]), user["full_name"])


@router.get("/tabs/{tab}")
async def get_tab(tab: DashboardTab, user: dict = Depends(get_current_user)):
    analysis = _latest_or_404(user["user_id"])
    dashboard = build_dashboard(analysis, get_profile(user["user_id"]), user["full_name"])
    return getattr(dashboard, tab.value)


@router.get("/companies/{company_name}", response_model=CompanyDetailResponse)
async def get_company_detail(company_name: str, user: dict = Depends(get_current_user)):
    """Overview, skills, eligibility, recommendations and interview link for one company."""
    analysis = _latest_or_404(user["user_id"])
    company = find_company(analysis["analysis_data"], company_name)
    if not company:
        raise HTTPException(status_code=404, detail=f"Company '{company_name}' not found in analysis")
    return build_company_detail(company)
