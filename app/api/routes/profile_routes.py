"""
Profile & Analysis Routes

GET /profile - Stored profile
GET /analyses - Analyses, newest first
GET /analyses/latest - Latest analysis
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends, Query

from app.core.auth import get_current_user
from app.services.profile_service import get_profile, get_latest_analysis, list_analyses
from app.schemas.schemas import ProfileResponse, AnalysisResponse

router = APIRouter(tags=["Profile"])


@router.get("/profile", response_model=ProfileResponse)
async def read_profile(user: dict = Depends(get_current_user)):
    profile = get_profile(user["user_id"])
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found. Submit the intake form first.")
    return profile


@router.get("/analyses", response_model=List[AnalysisResponse])
async def read_analyses(
    limit: int = Query(20, ge=1, le=100),
    user: dict = Depends(get_current_user)
):
    return list_analyses(user["user_id"], limit=limit)


@router.get("/analyses/latest", response_model=AnalysisResponse)
async def read_latest_analysis(user: dict = Depends(get_current_user)):
    analysis = get_latest_analysis(user["user_id"])
    if not analysis:
        raise HTTPException(status_code=404, detail="No analysis yet")
    return analysis
