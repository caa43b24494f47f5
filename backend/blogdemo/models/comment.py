"""
Comment model
"""
from datetime import datetime, timezone

from blogdemo.core.database import Base
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship


class Comment(Base):
    """Comment on an article; accepts nested attributes for the article"""
    __tablename__ = "comments"
    __nested_attributes__ = ("article",)

    id = Column(Integer, primary_key=True)
    author = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    article = relationship("Article", back_populates="comments")

    def __repr__(self):
        return f"<Comment(id={self.id}, author={self.author!r}, article_id={self.article_id})>"
