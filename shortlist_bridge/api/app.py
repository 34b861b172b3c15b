"""
Shortlist Bridge API — FastAPI endpoints.

Bridges a voice interface and a recruiter browser extension:
- Candidate upload (extension -> bridge)
- Voice command processing (voice agent -> bridge)
- Pending command polling and execution reports (extension <-> bridge)
- Dashboard / history for monitoring

All endpoints are CORS-open and answer OPTIONS with 200.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlist_bridge.errors import NotFoundError, ValidationError
from shortlist_bridge.models.base import WireModel, utcnow
from shortlist_bridge.models.config import BridgeConfig
from shortlist_bridge.state import BridgeState

logger = logging.getLogger(__name__)

API_PREFIX = "/api/candidates"

ENDPOINTS = [
    f"POST {API_PREFIX}/upload - Upload candidate data from the browser extension",
    f"POST {API_PREFIX}/voice/process - Process a voice command",
    f"GET {API_PREFIX}/voice/history - Recent voice commands",
    f"GET {API_PREFIX}/list - Current candidate list",
    f"GET {API_PREFIX}/commands/pending - Pending shortlist commands",
    f"POST {API_PREFIX}/commands/report - Report command execution status",
    f"GET {API_PREFIX}/commands/history - Recent execution reports",
    f"GET {API_PREFIX}/dashboard - Dashboard monitoring data",
]


# --- Request Models ---

class CandidateUploadRequest(WireModel):
    candidates: Any = None          # Validated by the EntityStore, not here
    source: str = "unknown"
    page_url: Optional[str] = None
    timestamp: Optional[str] = None


class VoiceMetadata(WireModel):
    source: str = "voice"


class VoiceCommandRequest(WireModel):
    voice_text: Optional[str] = None
    metadata: Optional[VoiceMetadata] = None


class CommandReportRequest(WireModel):
    command_id: Optional[str] = None
    success: bool = False
    message: Optional[str] = ""
    timestamp: Optional[datetime] = None
    source: str = "unknown"


# --- Helpers ---

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def _envelope(request: Request, **payload) -> dict:
    payload["requestId"] = _request_id(request)
    payload["timestamp"] = utcnow().isoformat()
    return payload


def _error(request: Request, status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=_envelope(request, success=False, error=error, **extra),
    )


# --- Application Factory ---

def create_app(
    state: Optional[BridgeState] = None,
    config: Optional[BridgeConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    bridge = state or BridgeState(config=config or BridgeConfig.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Shortlist bridge started (translation backend: %s)",
            "configured" if bridge.translator.backend_available else "keyword fallback only",
        )
        yield
        bridge.close()
        logger.info("Shortlist bridge stopped")

    app = FastAPI(
        title="Shortlist Bridge API",
        description="Voice-to-shortlist bridge for a recruiter browser extension",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.bridge = bridge

    @app.middleware("http")
    async def correlate(request: Request, call_next):
        request_id = f"req_{uuid4().hex[:12]}"
        request.state.request_id = request_id
        logger.info("[%s] %s %s", request_id, request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("[%s] Unhandled error", request_id)
            response = _error(
                request, 500, "Internal server error",
                message="An unexpected error occurred while handling the request",
            )
        response.headers["X-Request-ID"] = request_id
        return response

    # Outermost layer, so the 500 envelope gets CORS headers too.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )

    # === ERROR HANDLING ===

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Rejected: %s", _request_id(request), exc)
        return _error(request, 400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p != "body") or "body"
            message = f"Invalid request: {field} {first.get('msg', 'is invalid')}"
        else:
            message = "Invalid request"
        logger.info("[%s] Rejected: %s", _request_id(request), message)
        return _error(request, 400, message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("[%s] %s", _request_id(request), exc)
        return _error(request, 404, str(exc))

    @app.options("/{path:path}", include_in_schema=False)
    def preflight(path: str):
        return Response(status_code=200)

    # === SERVICE INDEX ===

    @app.get(API_PREFIX)
    def service_index(request: Request):
        """Health check and endpoint listing."""
        return _envelope(
            request,
            status="Shortlist Bridge API",
            endpoints=ENDPOINTS,
            integration={
                "translationBackend": (
                    "configured" if bridge.translator.backend_available
                    else "keyword fallback only"
                ),
                "voiceContext": "configured" if bridge.notifier.configured else "log only",
            },
            cors="Enabled for browser extension access",
        )

    # === CANDIDATES ===

    @app.post(f"{API_PREFIX}/upload")
    def upload_candidates(req: CandidateUploadRequest, request: Request):
        """Replace the candidate list with a fresh scrape."""
        records = bridge.upload_candidates(
            req.candidates,
            source=req.source,
            updated_at=req.timestamp,
            request_id=_request_id(request),
        )
        bridge.touch()
        names = [r.name for r in records]
        return _envelope(
            request,
            success=True,
            message=f"Successfully received {len(records)} candidates",
            candidatesReceived=len(records),
            count=len(records),
            candidateNames=names,
            source=req.source,
            pageUrl=req.page_url,
            lastUpdated=bridge.entity_store.last_updated,
        )

    @app.get(f"{API_PREFIX}/list")
    def list_candidates(request: Request):
        """Current candidate snapshot."""
        records = bridge.entity_store.snapshot()
        return _envelope(
            request,
            success=True,
            candidates=[r.to_wire() for r in records],
            count=len(records),
            lastUpdated=bridge.entity_store.last_updated,
        )

    # === VOICE ===

    @app.post(f"{API_PREFIX}/voice/process")
    def process_voice(req: VoiceCommandRequest, request: Request):
        """Translate a voice command and queue its shortlist actions."""
        source = req.metadata.source if req.metadata else "voice"
        submission, outcome, actions = bridge.process_voice_command(
            req.voice_text, source=source, request_id=_request_id(request)
        )
        bridge.touch()
        return _envelope(
            request,
            success=True,
            voiceCommandId=submission.id,
            voiceText=submission.text,
            interpretation=outcome.result.interpretation,
            actions=[a.to_wire() for a in actions],
            commandsGenerated=len(actions),
            provenance=outcome.provenance.value,
        )

    @app.get(f"{API_PREFIX}/voice/history")
    def voice_history(request: Request):
        """Recent voice submissions, oldest first."""
        entries = bridge.voice_log.entries()
        return _envelope(
            request,
            success=True,
            commands=[s.to_wire() for s in entries],
            count=len(entries),
        )

    # === COMMANDS ===

    @app.get(f"{API_PREFIX}/commands/pending")
    def pending_commands(request: Request):
        """Unexecuted commands for the extension to run."""
        pending = bridge.command_queue.list_pending()
        logger.info("[%s] Returning %d pending commands", _request_id(request), len(pending))
        return _envelope(
            request,
            success=True,
            commands=[a.to_wire() for a in pending],
            count=len(pending),
        )

    @app.post(f"{API_PREFIX}/commands/report")
    def report_command(req: CommandReportRequest, request: Request):
        """The extension reports how a command went."""
        action = bridge.report_execution(
            req.command_id,
            succeeded=req.success,
            message=req.message or "",
            executed_at=req.timestamp,
            source=req.source,
            request_id=_request_id(request),
        )
        bridge.touch()
        return _envelope(
            request,
            success=True,
            message="Command execution report received",
            commandId=action.id,
            command=action.to_wire(),
        )

    @app.get(f"{API_PREFIX}/commands/history")
    def execution_history(request: Request):
        """Recent execution reports, oldest first."""
        entries = bridge.execution_history.entries()
        return _envelope(
            request,
            success=True,
            reports=[e.to_wire() for e in entries],
            count=len(entries),
        )

    # === DASHBOARD ===

    @app.get(f"{API_PREFIX}/dashboard")
    def dashboard(request: Request):
        """Monitoring summary."""
        return _envelope(request, success=True, dashboard=bridge.dashboard())

    return app
