"""
role_hierarchy.api.routers.summary

Scope-aware counts endpoint (`GET /v1/summary`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from role_hierarchy.api.deps import summary_service_dep
from role_hierarchy.api.schemas import SummaryResponse
from role_hierarchy.auth.deps import get_caller
from role_hierarchy.auth.models import CallerContext
from role_hierarchy.services.summary_service import SummaryService

router = APIRouter(prefix="/v1/summary", tags=["summary"])


@router.get("", response_model=SummaryResponse)
async def get_summary(
    caller: CallerContext = Depends(get_caller),
    summaries: SummaryService = Depends(summary_service_dep),
) -> SummaryResponse:
    result = await summaries.summary(caller)
    return SummaryResponse(role_count=result.role_count, user_count=result.user_count)
