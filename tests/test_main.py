"""Tests for the env-auditor HTTP API."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from git.exc import GitCommandError
from httpx import AsyncClient, ASGITransport

from env_auditor.main import app


@pytest.fixture
def test_client():
    """Create async test client for FastAPI."""
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
def temp_dir():
    """Create a temporary project with an env file and one source file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / ".env").write_text("PORT=3000\nLOGLEVEL=debug\n")
        (root / "index.js").write_text(
            "const port = process.env.PORT;\n"
            "const level = process.env.LOGLEVEL;\n"
            "const secret = process.env.JWT_SECRET;\n"
        )
        yield root


class TestHealthEndpoint:
    """Test /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_ok(self, test_client):
        """Test that /health endpoint returns status ok."""
        async with test_client as client:
            response = await client.get("/health")

            assert response.status_code == 200
            assert response.json() == {"status": "ok"}


class TestScanEndpoint:
    """Test /scan endpoint."""

    @pytest.mark.asyncio
    async def test_scan_local_path(self, test_client, temp_dir):
        """Test scanning a local project returns a full report."""
        async with test_client as client:
            response = await client.post("/scan", json={"path": str(temp_dir)})

            assert response.status_code == 200
            data = response.json()
            assert "scan_id" in data
            assert data["summary"]["files_scanned"] == 1
            kinds = {(i["kind"], i["variable_name"]) for i in data["issues"]}
            assert kinds == {
                ("missing_variable", "JWT_SECRET"),
                ("inconsistent_naming", "LOGLEVEL"),
            }

    @pytest.mark.asyncio
    async def test_scan_with_options(self, test_client, temp_dir):
        """Test check selection and severity filtering."""
        async with test_client as client:
            response = await client.post(
                "/scan",
                json={"path": str(temp_dir), "checks": ["naming"], "min_severity": "warning"},
            )

            assert response.status_code == 200
            assert response.json()["issues"] == []

    @pytest.mark.asyncio
    async def test_scan_requires_path_or_repo(self, test_client):
        async with test_client as client:
            response = await client.post("/scan", json={})

            assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_scan_rejects_both_path_and_repo(self, test_client, temp_dir):
        async with test_client as client:
            response = await client.post(
                "/scan",
                json={"path": str(temp_dir), "repo_url": "https://github.com/example/app"},
            )

            assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_scan_missing_path(self, test_client, temp_dir):
        async with test_client as client:
            response = await client.post("/scan", json={"path": str(temp_dir / "nope")})

            assert response.status_code == 400
            assert "does not exist" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_scan_missing_named_env_file(self, test_client, temp_dir):
        async with test_client as client:
            response = await client.post(
                "/scan",
                json={"path": str(temp_dir), "env_files": [".env.production"]},
            )

            assert response.status_code == 400
            assert ".env.production" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_scan_unknown_check(self, test_client, temp_dir):
        async with test_client as client:
            response = await client.post("/scan", json={"path": str(temp_dir), "checks": ["bogus"]})

            assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_scan_clone_failure(self, test_client):
        """Test a failed clone is reported as a bad request."""
        with patch(
            "env_auditor.git_utils.Repo.clone_from",
            side_effect=GitCommandError("clone", 128),
        ):
            async with test_client as client:
                response = await client.post("/scan", json={"repo_url": "https://invalid/repo"})

                assert response.status_code == 400
                assert "Failed to clone repository" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_scan_repo_url(self, test_client, temp_dir):
        """Test scanning a repository URL with a mocked clone."""
        with patch("env_auditor.git_utils.clone_repo", return_value=temp_dir), \
                patch("env_auditor.git_utils.cleanup_repo"):
            async with test_client as client:
                response = await client.post("/scan", json={"repo_url": "https://github.com/example/app"})

                assert response.status_code == 200
                assert response.json()["summary"]["total_issues"] == 2

    @pytest.mark.asyncio
    async def test_scan_unexpected_error(self, test_client, temp_dir):
        with patch("env_auditor.main.run_scan", side_effect=RuntimeError("boom")):
            async with test_client as client:
                response = await client.post("/scan", json={"path": str(temp_dir)})

                assert response.status_code == 500
                assert "boom" in response.json()["detail"]


class TestListEndpoint:
    """Test /list endpoint."""

    @pytest.mark.asyncio
    async def test_list(self, test_client, temp_dir):
        async with test_client as client:
            response = await client.post("/list", json={"path": str(temp_dir)})

            assert response.status_code == 200
            data = response.json()
            assert [e["name"] for e in data["defined"]] == ["LOGLEVEL", "PORT"]
            assert [e["name"] for e in data["used"]] == ["JWT_SECRET", "LOGLEVEL", "PORT"]


class TestCompareEndpoint:
    """Test /compare endpoint."""

    @pytest.mark.asyncio
    async def test_compare(self, test_client, temp_dir):
        (temp_dir / ".env.example").write_text("PORT=8080\nJWT_SECRET=\n")

        async with test_client as client:
            response = await client.post(
                "/compare",
                json={"file1": ".env", "file2": ".env.example", "base_path": str(temp_dir), "show_values": True},
            )

            assert response.status_code == 200
            data = response.json()
            assert data["only_in_file1"] == ["LOGLEVEL"]
            assert data["only_in_file2"] == ["JWT_SECRET"]
            assert data["differing_values"] == [{"name": "PORT", "value1": "3000", "value2": "8080"}]

    @pytest.mark.asyncio
    async def test_compare_missing_file(self, test_client, temp_dir):
        async with test_client as client:
            response = await client.post(
                "/compare",
                json={"file1": str(temp_dir / ".env"), "file2": str(temp_dir / ".env.missing")},
            )

            assert response.status_code == 404
            assert ".env.missing" in response.json()["detail"]
