"""FastAPI application for env-auditor."""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from git.exc import GitCommandError

from .config import load_project_config
from .env_parser import EnvFileError
from .models import (
    CompareRequest,
    EnvComparison,
    ListRequest,
    ScanReport,
    ScanRequest,
    VariableListing,
)
from .scanner import (
    ScanOptions,
    checks_from_names,
    compare_env_files,
    list_variables,
    run_scan,
    scan_repository,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Env Auditor",
    description="Audits environment variables: missing, unused and inconsistently named variables across source code and env files",
    version="0.1.0",
)

# CORS - allow common development origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:8000",
    ],
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


def _scan_options(request: ScanRequest) -> ScanOptions:
    return ScanOptions(
        env_files=request.env_files,
        ignore=request.ignore,
        languages=request.languages,
        checks=checks_from_names(request.checks) if request.checks is not None else None,
        min_severity=request.min_severity,
    )


@app.post("/scan", response_model=ScanReport)
async def scan(request: ScanRequest) -> ScanReport:
    """
    Audit the environment variables of a project.

    - **path**: Local project directory (or **repo_url** to clone and scan)
    - **env_files**: Additional env files that must exist
    - **checks**: Analyses to run (missing, unused, naming, duplicates)
    - **min_severity**: Minimum severity to report (info/warning/error)
    """
    if bool(request.path) == bool(request.repo_url):
        raise HTTPException(status_code=400, detail="Provide exactly one of 'path' or 'repo_url'")

    try:
        options = _scan_options(request)
        if request.repo_url:
            logger.info(f"Scanning repository: {request.repo_url}")
            return scan_repository(request.repo_url, options, request.config_path)

        logger.info(f"Scanning path: {request.path}")
        config = load_project_config(request.path, request.config_path)
        return run_scan(request.path, config, options)

    except GitCommandError as e:
        logger.error(f"Failed to clone repository: {e}")
        raise HTTPException(status_code=400, detail=f"Failed to clone repository: {str(e)}")
    except (EnvFileError, ValueError) as e:
        logger.error(f"Invalid scan request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Scan failed: {e}")
        raise HTTPException(status_code=500, detail=f"Scan failed: {str(e)}")


@app.post("/list", response_model=VariableListing)
async def list_vars(request: ListRequest) -> VariableListing:
    """List every defined and used variable in a project."""
    try:
        config = load_project_config(request.path, request.config_path)
        return list_variables(request.path, config, ScanOptions(languages=request.languages))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Listing failed: {e}")
        raise HTTPException(status_code=500, detail=f"Listing failed: {str(e)}")


@app.post("/compare", response_model=EnvComparison)
async def compare(request: CompareRequest) -> EnvComparison:
    """
    Compare two env files by variable name.

    - **show_values**: Also report variables whose values differ
    """
    try:
        return compare_env_files(
            request.file1,
            request.file2,
            show_values=request.show_values,
            base_path=request.base_path,
        )
    except EnvFileError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Compare failed: {e}")
        raise HTTPException(status_code=500, detail=f"Compare failed: {str(e)}")
