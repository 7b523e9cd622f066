"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from external cron.
"""

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from taskwise.core.config import settings
from taskwise.core.deps import get_db
from taskwise.jobs.refresh_urls import RefreshResult, refresh_presigned_urls

router = APIRouter(prefix="/internal/scheduled", tags=["internal"])


def verify_internal_secret(x_internal_secret: str = Header(...)):
    """Verify the internal secret header."""
    if not settings.INTERNAL_SECRET:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if x_internal_secret != settings.INTERNAL_SECRET:
        raise HTTPException(status_code=403, detail="Invalid internal secret")


@router.post(
    "/refresh-urls",
    response_model=RefreshResult,
    dependencies=[Depends(verify_internal_secret)],
)
def refresh_urls(db: Session = Depends(get_db)):
    """Re-issue presigned URLs for stored images and task attachments."""
    return refresh_presigned_urls(db)
