"""
Article routes and the article JSON view
"""
from typing import Iterable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from blogdemo.api.params import request_params
from blogdemo.core.database import get_db
from blogdemo.core.logging_config import LoggingConfig
from blogdemo.core.parameters import Parameters
from blogdemo.models.article import Article

router = APIRouter(tags=["articles"])
logger = LoggingConfig.get_logger(__name__)


class ArticleView(BaseModel):
    """Exactly the fields exposed for an article"""
    id: int
    title: Optional[str] = None
    rank: Optional[int] = None
    body: Optional[str] = None
    url: str


def article_url(article: Article, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/articles/{article.id}.json"


def render_article(article: Article, base_url: str) -> dict:
    return ArticleView(
        id=article.id,
        title=article.title,
        rank=article.rank,
        body=article.body,
        url=article_url(article, base_url),
    ).model_dump()


def render_article_index(articles: Iterable[Article], base_url: str) -> List[dict]:
    """Project articles to the index JSON array"""
    return [render_article(article, base_url) for article in articles]


def article_params(params: Parameters) -> Parameters:
    return params.require_tree("article").permit(
        "title", "rank", "body",
        comments_attributes=["id", "author", "content"],
    )


def _get_article(db: Session, article_id: int) -> Article:
    article = db.get(Article, article_id)
    if article is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Article {article_id} not found")
    return article


@router.get("/articles.json", response_model=List[ArticleView])
async def list_articles(request: Request, db: Session = Depends(get_db)):
    articles = db.query(Article).order_by(Article.id).all()
    return render_article_index(articles, str(request.base_url))


@router.get("/articles/{article_id}.json", response_model=ArticleView)
async def show_article(article_id: int, request: Request, db: Session = Depends(get_db)):
    return render_article(_get_article(db, article_id), str(request.base_url))


@router.post("/articles.json", response_model=ArticleView, status_code=status.HTTP_201_CREATED)
async def create_article(
    request: Request,
    params: Parameters = Depends(request_params),
    db: Session = Depends(get_db),
):
    article = Article(article_params(params))
    db.add(article)
    db.commit()
    db.refresh(article)
    logger.info("Article created", extra={"article_id": article.id})
    return render_article(article, str(request.base_url))


@router.patch("/articles/{article_id}.json", response_model=ArticleView)
async def update_article(
    article_id: int,
    request: Request,
    params: Parameters = Depends(request_params),
    db: Session = Depends(get_db),
):
    article = _get_article(db, article_id)
    article.update_attributes(article_params(params))
    db.commit()
    db.refresh(article)
    logger.info("Article updated", extra={"article_id": article.id})
    return render_article(article, str(request.base_url))
