"""
Article model
"""
from datetime import datetime, timezone

from blogdemo.core.database import Base
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship


class Article(Base):
    """Blog article; accepts nested attributes for its comments"""
    __tablename__ = "articles"
    __nested_attributes__ = ("comments",)

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=True)
    rank = Column(Integer, nullable=True)
    body = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    comments = relationship("Comment", back_populates="article", order_by="Comment.id")

    def __repr__(self):
        return f"<Article(id={self.id}, title={self.title!r})>"
