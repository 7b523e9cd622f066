"""Common router - lookups shared by client forms."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskwise.core.deps import get_db
from taskwise.services import lookup_service

router = APIRouter()


@router.get("/get-existing-data", response_model=list[str])
def get_existing_data(
    collection: str = Query(...),
    key: str = Query(...),
    db: Session = Depends(get_db),
):
    """
    Distinct existing values of a field, e.g. taken workspace names.

    Unauthenticated so sign-up forms can check usernames and emails.
    """
    return lookup_service.distinct_values(db, collection, key)
