"""
Game Router - Career pool and matchups for the game client
app/routers/game.py

Endpoints:
- GET /api/careers                    - Filtered, sorted career list
- GET /api/careers/search?q=          - Substring search
- GET /api/careers/{career_id}/similar - Careers most like the given one
- GET /api/matchups?count=&difficulty= - Balanced matchups for a round

All endpoints read the dataset loaded at startup (app.state.career_service).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from app.exceptions import (
    BoundaryError,
    DataNotLoadedError,
    InsufficientPoolError,
)
from app.models.api import CareerListResponse, MatchupBatchResponse, MatchupResponse
from app.models.matchup import CareerFilter
from app.services.career_query import CareerQueryService
from app.services.data_loader import CareerDataService
from app.services.matchup_generator import (
    FILTER_PRESETS,
    MatchupGenerator,
    get_filter_preset,
    get_recommended_config,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Game"])

MAX_MATCHUPS = 50


# =============================================================================
# Dependencies
# =============================================================================

def get_data_service(request: Request) -> CareerDataService:
    service = getattr(request.app.state, "career_service", None)
    if service is None or not service.is_loaded:
        raise BoundaryError("Career data is not loaded yet. Please try again in a moment.", 503)
    return service


def get_query_service(
    request: Request,
    data: CareerDataService = Depends(get_data_service),
) -> CareerQueryService:
    return CareerQueryService(data, rng=getattr(request.app.state, "rng", None))


def get_matchup_generator(query: CareerQueryService = Depends(get_query_service)) -> MatchupGenerator:
    return MatchupGenerator(query)


def _build_filter(**fields) -> CareerFilter:
    try:
        return CareerFilter(**{k: v for k, v in fields.items() if v is not None})
    except ValidationError as e:
        first = e.errors()[0]
        raise BoundaryError(f"Invalid filter: {first.get('msg', 'invalid value')}", 400)


# =============================================================================
# Careers
# =============================================================================

@router.get("/careers", response_model=CareerListResponse, summary="List careers")
async def list_careers(
    cluster: Optional[str] = None,
    salary_min: Optional[int] = Query(None, ge=0),
    salary_max: Optional[int] = Query(None, ge=0),
    education: Optional[str] = None,
    growth_min: Optional[float] = None,
    tier: Optional[str] = None,
    education_level: Optional[int] = None,
    sort: str = Query("id", description="Field to sort by, dotted paths allowed (metadata.cluster)"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    limit: Optional[int] = Query(None, ge=1),
    query: CareerQueryService = Depends(get_query_service),
):
    criteria = _build_filter(
        cluster=cluster,
        salary_min=salary_min,
        salary_max=salary_max,
        education=education,
        growth_min=growth_min,
        tier=tier,
        education_level=education_level,
    )
    try:
        careers = query.sort(sort, order, criteria)
    except ValueError as e:
        raise BoundaryError(str(e), 400)
    if limit:
        careers = careers[:limit]
    return CareerListResponse(total=len(careers), careers=careers)


@router.get("/careers/search", response_model=CareerListResponse, summary="Search careers")
async def search_careers(
    q: str = Query("", description="Case-insensitive substring"),
    limit: Optional[int] = Query(None, ge=1),
    query: CareerQueryService = Depends(get_query_service),
):
    careers = query.search(q, limit=limit)
    return CareerListResponse(total=len(careers), careers=careers)


@router.get("/careers/{career_id}/similar", response_model=CareerListResponse, summary="Similar careers")
async def similar_careers(
    career_id: int,
    count: int = Query(5, ge=1, le=50),
    query: CareerQueryService = Depends(get_query_service),
):
    if query.data.get_by_id(career_id) is None:
        raise BoundaryError(f"Career {career_id} not found", 404)
    careers = query.similar(career_id, count)
    return CareerListResponse(total=len(careers), careers=careers)


# =============================================================================
# Matchups
# =============================================================================

@router.get("/matchups", response_model=MatchupBatchResponse, summary="Generate balanced matchups")
async def get_matchups(
    count: int = Query(1, ge=1, le=MAX_MATCHUPS),
    difficulty: Optional[str] = Query(None, description="easy, medium or hard"),
    preset: Optional[str] = Query(None, description=f"One of: {', '.join(FILTER_PRESETS)}"),
    generator: MatchupGenerator = Depends(get_matchup_generator),
):
    if preset is not None and preset not in FILTER_PRESETS:
        raise BoundaryError(f"Unknown preset: {preset}", 400)

    criteria = get_filter_preset(preset) if preset else CareerFilter()
    if difficulty:
        criteria = _build_filter(**{**criteria.model_dump(exclude_none=True), **get_recommended_config(difficulty)})

    try:
        matchups = generator.generate_multiple(count, criteria)
    except InsufficientPoolError as e:
        raise BoundaryError(str(e), 409)
    except DataNotLoadedError as e:
        raise BoundaryError(str(e), 503)

    if not matchups:
        raise BoundaryError("Could not find a balanced matchup for these settings", 409)

    return MatchupBatchResponse(
        requested=count,
        generated=len(matchups),
        difficulty=difficulty,
        matchups=[
            MatchupResponse(
                career_a=m.career_a,
                career_b=m.career_b,
                salary_diff=m.salary_diff,
                attempts=m.attempts,
            )
            for m in matchups
        ],
    )
