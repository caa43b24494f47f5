"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Tests always run against a private in-memory database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("ACTION_ON_UNPERMITTED_PARAMETERS", "log")

from blogdemo.core.database import Base, create_db_engine, get_db
from blogdemo.models import Article, Comment
from sqlalchemy.orm import Session, sessionmaker


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory schema for every test"""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    """Create a database session for testing"""
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def records(db):
    """
    Seed records shared by the tests:

    - ``first``: the article returned by ``first_article``
    - ``vacation``: an article with one comment
    - ``thanks``: a comment on ``vacation``
    """
    first = Article(title="Welcome", rank=1, body="First post")
    vacation = Article(title="Vacation", rank=2, body="We went to the mountains")
    thanks = Comment(author="Mary", content="Thanks for sharing!", article=vacation)
    db.add_all([first, vacation, thanks])
    db.commit()
    return {"first": first, "vacation": vacation, "thanks": thanks}


@pytest.fixture(scope="function")
def first_article(db, records):
    return db.query(Article).order_by(Article.id).first()


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from blogdemo.main import app
    from fastapi.testclient import TestClient

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
