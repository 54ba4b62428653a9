"""Visitor import API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from attendly.api.dependencies import CurrentUser, get_current_user
from attendly.schemas.attendance import VisitorImportRequest, VisitorImportResponse
from attendly.services.visitor_import import parse_visitor_import

router = APIRouter()


@router.post(
    "/visitors/parse",
    response_model=VisitorImportResponse,
    summary="Parse pasted visitor rows",
    description="Turn pasted spreadsheet rows into name/contact pairs. Nothing is stored.",
)
async def parse_visitors(
    payload: VisitorImportRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> VisitorImportResponse:
    visitors, truncated = parse_visitor_import(payload.text)
    return VisitorImportResponse(visitors=visitors, truncated=truncated)
