"""
Presigned URL refresh job.

Presigned URLs expire after PRESIGNED_URL_TTL_SECONDS, so stored image and
attachment URLs are re-issued on a schedule. Each row is committed on its
own; a failure is logged and the batch moves on.

Usage:
    from taskwise.jobs.refresh_urls import refresh_presigned_urls
    with SessionLocal() as db:
        refresh_presigned_urls(db)
"""

import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from taskwise.db.models import Project, User, Workspace
from taskwise.services import storage_service

logger = logging.getLogger(__name__)


class RefreshResult(BaseModel):
    users: int = 0
    workspaces: int = 0
    projects: int = 0
    attachments: int = 0
    failed: int = 0


def _refresh_image(db: Session, row, client) -> bool:
    """Re-presign img_url from img_key. Returns True when the row was updated."""
    if not row.img_key:
        return False
    row.img_url = storage_service.presign(row.img_key, client=client)
    db.commit()
    return True


def _refresh_project(db: Session, project: Project, client) -> int:
    """Re-presign the project image and every task attachment in one commit."""
    attachments = 0
    for task in project.tasks:
        for attachment in task.attachments:
            if attachment.doc_key:
                attachment.doc_url = storage_service.presign(attachment.doc_key, client=client)
                attachments += 1
    if project.img_key:
        project.img_url = storage_service.presign(project.img_key, client=client)
    flag_modified(project, "tasks")
    db.commit()
    return attachments


def refresh_presigned_urls(db: Session) -> RefreshResult:
    result = RefreshResult()
    client = storage_service.get_s3_client()

    for model, counter in ((User, "users"), (Workspace, "workspaces")):
        for row in db.query(model).all():
            try:
                if _refresh_image(db, row, client):
                    setattr(result, counter, getattr(result, counter) + 1)
            except Exception:
                db.rollback()
                result.failed += 1
                logger.exception("URL refresh failed for %s %s", model.__tablename__, row.id)

    for project in db.query(Project).all():
        try:
            result.attachments += _refresh_project(db, project, client)
            result.projects += 1
        except Exception:
            db.rollback()
            result.failed += 1
            logger.exception("URL refresh failed for project %s", project.id)

    logger.info(
        "URL refresh done: users=%d workspaces=%d projects=%d attachments=%d failed=%d",
        result.users,
        result.workspaces,
        result.projects,
        result.attachments,
        result.failed,
    )
    return result
