import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from careforms.database import Base, get_db
from careforms.main import app
from careforms.schemas.template import FormTemplate
import careforms.models  # noqa: F401


def make_template(sections, template_id="tpl1", name="Test Form"):
    return FormTemplate.model_validate({"id": template_id, "name": name, "sections": sections})


@pytest.fixture
def simple_template():
    """One section, two required fields labelled after their ids."""
    return make_template([
        {
            "id": "s1",
            "title": "Basics",
            "fields": [
                {"id": "f1", "label": "f1", "fieldType": "text", "isRequired": True},
                {"id": "f2", "label": "f2", "fieldType": "text", "isRequired": True},
            ],
        },
    ])


@pytest.fixture
def mixed_template():
    """Two required top-level fields plus a repeatable section capped at three."""
    return make_template([
        {
            "id": "info",
            "title": "Client Information",
            "fields": [
                {"id": "name", "label": "Client Name", "fieldType": "text", "isRequired": True},
                {"id": "date", "label": "Date", "fieldType": "date", "isRequired": True},
            ],
        },
        {
            "id": "act",
            "title": "Activity",
            "isRepeatable": True,
            "maxRepeat": 3,
            "fields": [
                {"id": "desc", "label": "Activity Description", "fieldType": "textarea", "isRequired": True},
            ],
        },
    ])


@pytest.fixture
def all_types_template():
    return make_template([
        {
            "id": "s",
            "title": "Everything",
            "fields": [
                {"id": "name", "label": "Name", "fieldType": "text"},
                {"id": "notes", "label": "Session Notes", "fieldType": "text"},
                {"id": "when", "label": "Date", "fieldType": "date"},
                {"id": "story", "label": "Statement", "fieldType": "textarea", "placeholder": "Describe..."},
                {"id": "svc", "label": "Service", "fieldType": "select", "options": '["Respite", "Behavioral Support"]'},
                {"id": "resp", "label": "Response", "fieldType": "radio", "options": ["Refused", "Successful"]},
                {"id": "prompts", "label": "Prompts", "fieldType": "multiselect", "options": '["Modeling", "Verbal direction"]'},
            ],
        },
    ])


@pytest.fixture
def db_session():
    """Creates a test database session on an in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client for the FastAPI app, bound to the test database."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
