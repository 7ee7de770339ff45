"""HTTP-level tests for the FastAPI application."""

import httpx
import pytest
import pytest_asyncio

from app.dependencies import coordinator_provider, db_session
from app.main import app
from factories import make_job, make_pending_application, make_student


@pytest_asyncio.fixture
async def client(session_factory, coordinator):
    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[db_session] = _session
    app.dependency_overrides[coordinator_provider] = lambda: coordinator
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class TestApplicationsApi:
    @pytest.mark.asyncio
    async def test_submit_then_duplicate(self, seed, client):
        await seed(make_student("S001", academics={"ug_cgpa": 7.0}), make_job(1, requirement={"ug_cgpa": 7.5}))

        created = await client.post("/applications", json={"student_id": "S001", "job_id": 1})
        duplicate = await client.post("/applications", json={"student_id": "S001", "job_id": 1})

        assert created.status_code == 201
        body = created.json()
        assert body["message"] == "Application created but marked as not eligible"
        assert body["data"]["eligibility_status"] == "not_eligible"
        assert body["data"]["checks"]["ug_cgpa_meets"] is False
        assert duplicate.status_code == 409
        assert duplicate.json() == {
            "success": False,
            "message": "Application already exists for this student and job",
        }

    @pytest.mark.asyncio
    async def test_submit_unknown_student(self, seed, client):
        await seed(make_job(1))

        response = await client.post("/applications", json={"student_id": "S404", "job_id": 1})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_eligibility_check(self, seed, client):
        await seed(make_student("S001", branch="cse"), make_job(1, requirement={"allowed_branches": ["CSE", "ECE"]}))

        response = await client.get("/students/S001/jobs/1/eligibility")

        assert response.status_code == 200
        body = response.json()
        assert body["eligible"] is True
        assert body["eligibility_status"] == "eligible"
        assert body["checks"]["branch_meets"] is True

    @pytest.mark.asyncio
    async def test_sweep(self, seed, client):
        await seed(make_student("S001"), make_job(1), make_pending_application(1, "S001", 1))

        response = await client.post("/applications/eligibility/sweep")

        assert response.status_code == 200
        body = response.json()
        assert body["updated"] == 1
        assert body["data"] == [{"application_id": 1, "outcome": "updated", "eligible": True, "error": None}]


class TestRequirementsApi:
    @pytest.mark.asyncio
    async def test_lifecycle(self, seed, client):
        await seed(make_job(1))

        created = await client.post("/jobs/1/requirement", json={"ug_cgpa": 7.5, "allowed_branches": ["cse"]})
        patched = await client.patch("/jobs/1/requirement", json={"tenth_percent": 60})
        fetched = await client.get("/jobs/1/requirement")
        deleted = await client.delete("/jobs/1/requirement")
        missing = await client.get("/jobs/1/requirement")

        assert created.status_code == 201
        assert created.json()["data"]["allowed_branches"] == ["CSE"]
        assert patched.status_code == 200
        assert fetched.json()["data"]["ug_cgpa"] == 7.5
        assert fetched.json()["data"]["tenth_percent"] == 60
        assert deleted.status_code == 200
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_branch(self, seed, client):
        await seed(make_job(1))

        response = await client.post("/jobs/1/requirement", json={"allowed_branches": ["CSE", "PHYSICS"]})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid branch: PHYSICS"

    @pytest.mark.asyncio
    async def test_out_of_range_cgpa(self, seed, client):
        await seed(make_job(1))

        response = await client.post("/jobs/1/requirement", json={"ug_cgpa": 11})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("ug_cgpa: ")

    @pytest.mark.asyncio
    async def test_empty_patch(self, seed, client):
        await seed(make_job(1, requirement={"ug_cgpa": 6.0}))

        response = await client.patch("/jobs/1/requirement", json={})

        assert response.status_code == 400
