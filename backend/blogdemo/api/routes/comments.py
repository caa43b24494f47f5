"""
Comment routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from blogdemo.api.params import request_params
from blogdemo.core.database import get_db
from blogdemo.core.logging_config import LoggingConfig
from blogdemo.core.parameters import Parameters
from blogdemo.models.comment import Comment

router = APIRouter(tags=["comments"])
logger = LoggingConfig.get_logger(__name__)


class CommentView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author: Optional[str] = None
    content: Optional[str] = None
    article_id: Optional[int] = None


def comment_params(params: Parameters) -> Parameters:
    return params.require_tree("comment").permit(
        "author", "content", "article_id",
        article_attributes=["id", "title", "body"],
    )


@router.post("/comments.json", response_model=CommentView, status_code=status.HTTP_201_CREATED)
async def create_comment(
    params: Parameters = Depends(request_params),
    db: Session = Depends(get_db),
):
    comment = Comment(comment_params(params))
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment created", extra={"comment_id": comment.id, "article_id": comment.article_id})
    return comment
