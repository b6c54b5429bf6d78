# app/routers/leaderboard.py

from fastapi import APIRouter, Depends, Path, Query
from typing import List

from app.config import COUNTRY_LEADERBOARD_LIMIT, GLOBAL_LEADERBOARD_LIMIT
from app.dependencies import get_leaderboard_service
from app.leaderboard import LeaderboardService
from app.models import LeaderboardEntry, ScoreSubmission, TotalScore

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.post("/score", response_model=LeaderboardEntry)
async def submit_score(
    submission: ScoreSubmission,
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """Submit or update a player's score. Lower scores leave the entry unchanged."""
    return await service.submit_score(submission.playerName, submission.score, submission.country)


@router.get("/global", response_model=List[LeaderboardEntry])
async def get_global_leaderboard(
    limit: int = Query(GLOBAL_LEADERBOARD_LIMIT, ge=1),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return await service.get_global_leaderboard(limit)


@router.get("/country/{country}", response_model=List[LeaderboardEntry])
async def get_country_leaderboard(
    country: str = Path(min_length=2, max_length=2),
    limit: int = Query(COUNTRY_LEADERBOARD_LIMIT, ge=1),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return await service.get_country_leaderboard(country, limit)


@router.get("/total", response_model=TotalScore)
async def get_total_score(service: LeaderboardService = Depends(get_leaderboard_service)):
    """Sum of every player's best score."""
    return {"totalScore": await service.get_total_global_score()}
