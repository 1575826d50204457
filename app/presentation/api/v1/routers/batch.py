"""
Batch image search endpoint
"""

import logging

from fastapi import APIRouter, Depends, Query

from app.application.models import BatchRequest
from app.application.use_cases.batch_search import BatchSearchUseCase
from app.core.config import settings
from app.presentation.api.v1.dependencies.batch import get_batch_search_use_case
from app.presentation.api.v1.schemas.batch import (
    BatchDiagnosticsResponse,
    BatchSearchRequest,
    ItemOutcomeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["batch"])


@router.post("/batch")
async def batch_search(
    payload: BatchSearchRequest,
    diagnostics: bool = Query(False),
    use_case: BatchSearchUseCase = Depends(get_batch_search_use_case),
):
    """Search images for every (query, category) pair.

    Returns ``{query: [url, ...]}`` for the items that succeeded. With
    ``?diagnostics=true`` the per-item statuses are returned as well.
    """
    request = BatchRequest.from_payload(
        payload.queries, payload.categories, settings.default_category
    )
    outcome = await use_case.dispatch(request)

    if not diagnostics:
        return dict(outcome.results)

    return BatchDiagnosticsResponse(
        results=dict(outcome.results),
        items=[
            ItemOutcomeResponse(
                index=item.index,
                query=item.query,
                category=item.category,
                status=item.status,
                reason=item.reason,
                count=item.count,
            )
            for item in outcome.items
        ],
    )
