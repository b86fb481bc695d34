"""
Shared test configuration.

SQLite in-memory stands in for PostgreSQL, mongomock for MongoDB, and the
AI model is replaced by FakeAIClient. Environment must be set before any
app module is imported because settings and the engine are module-level.
"""

import copy
import os
import sys
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AI_API_KEY"] = "test-key"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import mongomock
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from app.db.mongodb import set_mongo_client
from app.db.postgres import engine
from app.db.schema import init_schema
from app.main import app
from app.services.analysis_service import AnalysisPipeline, get_analysis_pipeline


SAMPLE_ANALYSIS = {
    "overallScore": 72,
    "companies": [
        {
            "name": "TechCorp",
            "matchPercentage": 85,
            "description": "Cloud solutions company",
            "eligibilityCriteria": [
                {"name": "CGPA", "studentValue": 8.2, "requiredValue": 7.5, "isMet": True},
                {"name": "Backlogs", "studentValue": 0, "requiredValue": "None", "isMet": True},
            ],
            "skillGaps": [
                {"skill": "Data Structures", "studentLevel": 7, "requiredLevel": 9, "gap": 2},
                {"skill": "React", "studentLevel": 8, "requiredLevel": 7, "gap": -1},
            ],
            "recommendations": [
                {
                    "title": "Practice graph problems",
                    "description": "Solve 20 medium graph problems",
                    "priority": "high",
                    "resources": [{"title": "LeetCode Graph", "link": "https://leetcode.com/tag/graph/"}],
                }
            ],
            "strengthAreas": ["React development"],
            "improvementAreas": ["Data structures"],
        },
        {
            "name": "Data Systems",
            "matchPercentage": 55,
            "description": "Analytics firm",
            "eligibilityCriteria": [],
            "skillGaps": [],
            "recommendations": [],
            "strengthAreas": [],
            "improvementAreas": [],
        },
    ],
    "actionPlan": [
        {
            "action": "Strengthen data structures",
            "timeline": "4 weeks",
            "resources": [{"name": "CLRS", "url": "https://mitpress.mit.edu/clrs"}],
        }
    ],
}


class FakeAIClient:
    """Records calls and returns a canned analysis (or raises)."""

    def __init__(self, response: dict = None, error: Exception = None):
        self.response = copy.deepcopy(response if response is not None else SAMPLE_ANALYSIS)
        self.error = error
        self.calls = []

    def analyze_profile(self, profile, resume_text=None, requirements_text=None):
        self.calls.append({
            "profile": profile,
            "resume_text": resume_text,
            "requirements_text": requirements_text,
        })
        if self.error:
            raise self.error
        return copy.deepcopy(self.response)


@pytest.fixture(autouse=True)
def clean_stores():
    """Fresh tables and a fresh in-memory MongoDB for every test."""
    init_schema(engine)
    with engine.begin() as connection:
        for table in ("analyses", "profiles", "revoked_tokens", "users"):
            connection.execute(text(f"DELETE FROM {table}"))
    set_mongo_client(mongomock.MongoClient())
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def fake_ai() -> FakeAIClient:
    """Route the submit endpoint through FakeAIClient."""
    fake = FakeAIClient()
    app.dependency_overrides[get_analysis_pipeline] = lambda: AnalysisPipeline(ai_client=fake)
    return fake


def register_and_login(client: TestClient, email: str = "priya@example.com",
                       password: str = "secret123", full_name: str = "Priya Sharma") -> dict:
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "confirm_password": password,
        "full_name": full_name,
    })
    assert response.status_code == 201, response.text
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    return register_and_login(client)


@pytest.fixture
def user_id(client: TestClient, auth_headers: dict) -> int:
    return client.get("/api/auth/me", headers=auth_headers).json()["user_id"]
