# backend/tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from birdsurvey.api.auth import build_access_token
from birdsurvey.db import enable_sqlite_foreign_keys, get_db, init_db
from birdsurvey.main import app
from birdsurvey.models.location import Location

SUBMITTER_ID = 7


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    session.add_all(
        [
            Location(id=1, site_code="GB-01", site_name="Galveston Bay North"),
            Location(id=2, site_code="MB-04", site_name="Matagorda Bay East"),
        ]
    )
    session.commit()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {build_access_token(user_id=SUBMITTER_ID, email='observer@example.org')}"}


@pytest.fixture()
def foraging_payload():
    return {
        "locationId": 1,
        "siteTypeId": 2,
        "accessPointId": 3,
        "vantagePointId": 4,
        "tideId": 5,
        "weatherId": 6,
        "waterHeightId": 7,
        "windSpeed": 12,
        "temperature": 28,
        "observers": "A. Heron, B. Egret",
        "surveyComments": "calm morning",
        "disturbanceComments": "one kayak",
        "startDate": "5/1/2020",
        "startTime": "7:05 AM",
        "endTime": "10:45 AM",
        "observations": [
            {
                "birdSpeciesId": 101,
                "adults": 4,
                "juveniles": 2,
                "primaryActivityId": 1,
                "secondaryActivityId": 2,
                "habitatId": 3,
                "feedingId": 1,
            }
        ],
        "disturbances": [
            {"disturbanceTypeId": 9, "durationMinutes": 5, "quantity": 1, "behavior": "flushed"}
        ],
    }


@pytest.fixture()
def rookery_payload():
    return {
        "locationId": 2,
        "siteTypeId": 1,
        "accessPointId": 2,
        "vantagePointId": 3,
        "prepTimeHours": 2,
        "observers": "C. Ibis",
        "surveyComments": "colony active",
        "disturbanceComments": "",
        "startDate": "2020-06-10T00:00:00",
        "startTime": "2020-06-10T08:15:00",
        "endTime": "2020-06-10T09:30:00",
        "observations": [
            {
                "birdSpeciesId": 201,
                "adults": 40,
                "chicksPresent": True,
                "nestsPresent": True,
                "fledglingsPresent": False,
            }
        ],
        "disturbances": [
            {"disturbanceTypeId": 3, "durationMinutes": 10, "quantity": 2, "behavior": "alarm calls"}
        ],
    }
