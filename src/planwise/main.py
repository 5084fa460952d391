"""
PlanWise API - Main FastAPI application.

Entry point for the PlanWise backend server.
"""

import json
import logging
import platform
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from planwise import __version__
from planwise.config import get_settings
from planwise.core.models import AnalyzeRequest, AssessmentLookupRequest
from planwise.core.normalizer import extract_json
from planwise.engine import Analyzer
from planwise.errors import MissingInputError, UnparseableOutputError
from planwise.storage import AssessmentsStore
from planwise.workflow import N8NWorkflowClient, WorkflowError, WorkflowNotConfiguredError

logger = logging.getLogger(__name__)

ALL_RESULTS_LIMIT = 50


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - setup and teardown."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    workflow = N8NWorkflowClient(settings.n8n_webhook_url, timeout_s=settings.n8n_timeout_seconds)
    app.state.analyzer = Analyzer(workflow, settings)
    app.state.assessments = AssessmentsStore(settings)

    if not settings.n8n_webhook_url:
        logger.warning("N8N_WEBHOOK_URL is not set, analyze requests will fail")

    yield

    # Cleanup
    await workflow.close()


app = FastAPI(
    title="PlanWise API",
    description="Teaching and behavior plans from caregiver observation notes",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=600,
)


# =============================================================================
# Dependencies
# =============================================================================


def get_analyzer(request: Request) -> Analyzer:
    return request.app.state.analyzer


def get_assessments_store(request: Request) -> AssessmentsStore:
    return request.app.state.assessments


async def read_json_body(request: Request) -> dict[str, Any]:
    """
    Request body as a JSON object.

    Some clients send JSON with a text/plain content type or with stray
    text around it; the body is recovered where possible and otherwise
    treated as empty.
    """
    raw = await request.body()
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        body = extract_json(raw.decode("utf-8", errors="replace"))
    return body if isinstance(body, dict) else {}


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get("/health")
async def health() -> dict[str, str]:
    """Basic health check."""
    return {"status": "healthy", "version": __version__}


# =============================================================================
# Analyze Endpoint
# =============================================================================


@app.get("/api/analyze")
async def analyze_status() -> dict[str, Any]:
    return {
        "ok": True,
        "msg": "analyze endpoint OK",
        "runtime": f"python {platform.python_version()}",
        "analysisHint": "send analysisType: 'behavior' or planType: 'behavioral' for a BIP",
    }


@app.post("/api/analyze")
async def analyze(
    body: dict[str, Any] = Depends(read_json_body),
    analyzer: Analyzer = Depends(get_analyzer),
) -> JSONResponse:
    """
    Analyze an observation note into a canonical plan.

    Pipeline: Prompt → Workflow → JSON recovery → Plan normalizer → Envelope
    """
    analyze_request = AnalyzeRequest.model_validate(body)

    try:
        envelope = await analyzer.analyze(analyze_request)
    except MissingInputError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except WorkflowNotConfiguredError as e:
        logger.error("Analyze rejected: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)})
    except WorkflowError as e:
        logger.error("Workflow call failed: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to call n8n webhook", "detail": str(e)},
        )
    except UnparseableOutputError as e:
        return JSONResponse(
            status_code=500,
            content={
                "error": "n8n response not parseable as JSON",
                "hint": "Ensure the workflow returns a JSON object only",
                "raw": e.raw_text,
                "usedCurriculum": e.used_curriculum,
            },
        )
    except Exception as e:
        logger.exception("Analyze failed")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return JSONResponse(content=envelope)


# =============================================================================
# Assessments Endpoint
# =============================================================================


@app.get("/api/assessments/by-name")
async def assessments_status() -> dict[str, Any]:
    return {"ok": True, "msg": "assessments/by-name endpoint OK"}


@app.post("/api/assessments/by-name")
async def assessments_by_name(
    body: dict[str, Any] = Depends(read_json_body),
    store: AssessmentsStore = Depends(get_assessments_store),
) -> JSONResponse:
    """Find stored assessments for a child, newest first."""
    lookup = AssessmentLookupRequest.model_validate(body)
    if not lookup.lookup_name:
        return JSONResponse(
            status_code=400,
            content={"ok": False, "error": "childName is required in request body"},
        )

    try:
        results = await store.find_by_child_name(
            lookup.lookup_name,
            limit=ALL_RESULTS_LIMIT if lookup.return_all else 1,
        )
    except Exception as e:
        logger.exception("Assessment lookup failed")
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})

    return JSONResponse(
        content={"ok": True, "count": len(results), "results": jsonable_encoder(results)}
    )


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "planwise.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
