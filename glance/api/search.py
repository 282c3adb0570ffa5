"""
Academic search API endpoint
"""

from fastapi import APIRouter, Depends
import logging

from glance.api.deps import get_current_user, get_search_rate_limiter, get_search_service
from glance.core.security import CurrentUser
from glance.middleware.rate_limiter import RateLimiter
from glance.schemas.search import SearchRequest, SearchResponse
from glance.services.chat_service import require_text
from glance.services.search_service import AcademicSearchService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.post("/search", response_model=SearchResponse)
async def search_papers(
    request: SearchRequest,
    current_user: CurrentUser = Depends(get_current_user),
    limiter: RateLimiter = Depends(get_search_rate_limiter),
    search_service: AcademicSearchService = Depends(get_search_service),
):
    """
    Search Google Scholar and ResearchGate

    Raises:
        ValidationError: 400 for a blank query
        RateLimitExceededError: 429 with Retry-After once the caller's window is used up
    """
    query = require_text(request.query, "Query is required")
    limiter.check(current_user.id)

    return await search_service.search(query, request.filter)
