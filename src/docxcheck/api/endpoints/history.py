# src/docxcheck/api/endpoints/history.py
"""Per-user analysis history."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from docxcheck.api.dependencies import CurrentIdentityDep, HistoryLedgerDep
from docxcheck.schemas.history import HistoryEntryResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["history"])


@router.get(
    "/history",
    summary="List the caller's analyses, newest first",
    response_model=list[HistoryEntryResponse],
)
async def list_history(
    identity: CurrentIdentityDep,
    ledger: HistoryLedgerDep,
) -> list[HistoryEntryResponse]:
    """Return every history entry owned by the authenticated identity."""
    try:
        entries = ledger.list_for(identity.id)
    except SQLAlchemyError as err:
        logger.exception("Fetching history for user %s failed", identity.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch history",
        ) from err
    return [HistoryEntryResponse.model_validate(entry) for entry in entries]
