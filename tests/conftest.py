import pytest

from app import create_app
from models import db
from tests.fakes import FakeGenerator


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def app(generator):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "GEMINI_API_KEY": "",
        },
        text_generator=generator,
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
