"""Comments API — read, edit and delete a single comment.

Creating comments lives under /reviews/:id/comments.
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.auth.dependencies import get_current_user
from reviewstore.db.engine import get_db
from reviewstore.db.models import User
from reviewstore.schemas.review import CommentRead, CommentUpdate
from reviewstore.services.comment_service import CommentService

router = APIRouter(prefix="/comments")


def _get_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.get("/{comment_id}", response_model=CommentRead)
async def get_comment(comment_id: uuid.UUID, svc: CommentService = Depends(_get_service)):
    return await svc.get_comment(comment_id)


@router.put("/{comment_id}", response_model=CommentRead)
async def update_comment(
    comment_id: uuid.UUID,
    body: CommentUpdate,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_get_service),
):
    return await svc.update_comment(comment_id, caller_id=user.id, content=body.content)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_get_service),
):
    await svc.delete_comment(comment_id, caller_id=user.id)
    return Response(status_code=204)
