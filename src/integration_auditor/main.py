"""FastAPI application for the integration auditor."""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .auditor import resolve_catchers, run_audit
from .errors import PatternError
from .models import AuditRequest, AuditResult

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Integration Auditor",
    description="Audits a source tree for inbound and outbound integration call sites",
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


@app.post("/audit", response_model=AuditResult)
def audit(request: AuditRequest) -> AuditResult:
    """
    Audit a project directory for call-ins and call-outs.

    - **path**: Root directory of the project
    - **glob_pattern**: Files to scan (default Apex classes and triggers)
    - **catchers**: Optional custom catchers
    """
    try:
        catchers = resolve_catchers(request)
    except PatternError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        logger.info(f"Auditing project: {request.path}")
        return run_audit(request, catchers=catchers)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Audit failed: {e}")
        raise HTTPException(status_code=500, detail=f"Audit failed: {str(e)}")
