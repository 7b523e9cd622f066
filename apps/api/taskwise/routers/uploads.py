"""Uploads router - store files in object storage and issue presigned URLs."""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel

from taskwise.core.deps import get_current_user
from taskwise.db.models import User
from taskwise.services import storage_service

router = APIRouter()


class UploadResponse(BaseModel):
    presigned_url: str
    img_key: str


class PresignResponse(BaseModel):
    presigned_url: str


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: Annotated[UploadFile, File()],
    user: User = Depends(get_current_user),
):
    """
    Upload a file.

    The returned key is what images and attachments store; the URL expires
    and is re-issued by the refresh job.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File is empty")
    if len(content) > storage_service.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File exceeds 25 MB limit")

    return storage_service.upload(
        filename=file.filename or "untitled",
        file=BytesIO(content),
        content_type=file.content_type,
    )


@router.get("/presign", response_model=PresignResponse)
def presign(
    key: str = Query(..., min_length=1),
    user: User = Depends(get_current_user),
):
    return PresignResponse(presigned_url=storage_service.presign(key))
