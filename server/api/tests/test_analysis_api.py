"""
Tests for the analysis endpoint.

The analysis service is replaced with one backed by a fake structured LLM
and a stubbed content fetcher, so no network or OpenAI access is needed.
"""

import asyncio
import time

import httpx
import pytest
from langchain_core.runnables import RunnableLambda
from unittest.mock import Mock

from agents.code_analysis import CodeAnalysisService, ContentFetcher, get_analysis_service
from config import Settings
from database import repository


@pytest.fixture
def use_service(app):
    def install(service: CodeAnalysisService) -> None:
        app.dependency_overrides[get_analysis_service] = lambda: service
    return install


def _service(llm, content="function processUserData(u) { return u; }"):
    fetcher = Mock(spec=ContentFetcher)
    fetcher.fetch_project_content.return_value = content
    return CodeAnalysisService(llm, fetcher, Settings(openai_api_key=None))


class TestAnalyzeProject:

    def test_successful_analysis(
        self, client, db_session, website_project, use_service, fake_llm_factory, sample_analysis
    ):
        llm, _ = fake_llm_factory(result=sample_analysis)
        use_service(_service(llm))

        response = client.post("/api/analyze", json={"projectId": website_project.id})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Analysis completed successfully"
        assert body["functionCount"] == 2
        assert body["analysisId"].startswith(f"analysis_{website_project.id}_")

        db_session.expire_all()
        assert repository.get_project(db_session, website_project.id).status == "completed"
        functions = client.get(f"/api/projects/{website_project.id}/functions").json()["functions"]
        assert [f["function_name"] for f in functions] == ["processUserData", "saveToDatabase"]

    def test_failed_analysis_marks_project(
        self, client, db_session, website_project, use_service, fake_llm_factory
    ):
        llm, _ = fake_llm_factory(error=RuntimeError("model unavailable"))
        use_service(_service(llm))

        response = client.post("/api/analyze", json={"projectId": website_project.id})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to analyze code with AI"}
        db_session.expire_all()
        assert repository.get_project(db_session, website_project.id).status == "failed"

    def test_no_content_fails(self, client, db_session, website_project, use_service, fake_llm_factory):
        llm, calls = fake_llm_factory(result={"functions": []})
        use_service(_service(llm, content=""))

        response = client.post("/api/analyze", json={"projectId": website_project.id})

        assert response.status_code == 500
        assert response.json()["error"] == "No code content found to analyze"
        assert calls == []

    def test_analysis_type_forwarded(self, client, website_project, use_service, fake_llm_factory):
        llm, calls = fake_llm_factory(result={"functions": []})
        use_service(_service(llm))

        client.post("/api/analyze", json={"projectId": website_project.id, "analysisType": "quick"})

        assert "Analysis depth: quick" in calls[0].to_string()

    def test_project_id_required(self, client):
        response = client.post("/api/analyze", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Project ID is required"

    def test_unknown_project(self, client, use_service, fake_llm_factory):
        llm, _ = fake_llm_factory(result={"functions": []})
        use_service(_service(llm))

        assert client.post("/api/analyze", json={"projectId": 31}).status_code == 404


class TestAnalysisConcurrency:
    """A running analysis must not stall the rest of the server."""

    def test_health_answers_while_analysis_runs(self, app, website_project, use_service):
        def slow_llm(prompt_value):
            time.sleep(1.0)
            return {"functions": []}

        use_service(_service(RunnableLambda(slow_llm)))

        async def run_concurrently():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
                analysis = asyncio.create_task(
                    client.post("/api/analyze", json={"projectId": website_project.id})
                )
                await asyncio.sleep(0.2)

                started = time.monotonic()
                health = await client.get("/health")
                latency = time.monotonic() - started

                return health, latency, await analysis

        health, latency, analysis = asyncio.run(run_concurrently())

        assert health.status_code == 200
        assert latency < 0.5
        assert analysis.status_code == 200
        assert analysis.json()["functionCount"] == 0
