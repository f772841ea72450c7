"""
FastAPI Application - REST adapter for the game engine.

Endpoints:
    GET    /api/v1/health                    Health check
    POST   /api/v1/sessions                  Create session (round 1 starts)
    GET    /api/v1/sessions                  List active sessions
    POST   /api/v1/sessions/restore          Create session from a wire snapshot
    GET    /api/v1/sessions/{id}             Get session status
    DELETE /api/v1/sessions/{id}             End session
    POST   /api/v1/sessions/{id}/moves       Human move (+ computer reply)
    POST   /api/v1/sessions/{id}/reset       Start the next round
    GET    /api/v1/sessions/{id}/wire        Compact text form of the board

Computer moves are searched in the worker threadpool so the event loop
stays responsive on large boards.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import os

from .. import __version__

# Environment configuration
NOUGHTS_ENV = os.getenv("NOUGHTS_ENV", "development")
NOUGHTS_SESSION_TTL = int(os.getenv("NOUGHTS_SESSION_TTL", "3600"))
NOUGHTS_SEARCH_WORKERS = int(os.getenv("NOUGHTS_SEARCH_WORKERS", "1"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Error code -> HTTP status; anything unlisted is a 400
STATUS_FOR_CODE = {
    "SESSION_NOT_FOUND": 404,
    "NOT_PLAYERS_TURN": 409,
    "GAME_ALREADY_OVER": 409,
    "STALE_EVALUATION": 409,
    "INVALID_STATE": 409,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.concurrency import run_in_threadpool
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..session import SessionManager
    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        MoveRequest,
        RestoreRequest,
        # Response models
        SessionResponse,
        MoveResponse,
        WireResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
    )

    app = FastAPI(
        title="Noughts Engine API",
        description="""
Turn-based N x N grid game engine with a computer opponent.

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `SESSION_NOT_FOUND` | 404 | Session does not exist or has expired |
| `INVALID_CONFIG` | 400 | Session settings rejected |
| `INVALID_MOVE` | 400 | Cell out of range or occupied |
| `WIRE_FORMAT` | 400 | Wire snapshot could not be decoded |
| `NOT_PLAYERS_TURN` | 409 | The side to move is played by the computer |
| `GAME_ALREADY_OVER` | 409 | Round finished; reset to play again |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService(
        session_manager=SessionManager(search_workers=NOUGHTS_SEARCH_WORKERS)
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or STATUS_FOR_CODE.get(error_code, 400),
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def respond(response):
        """Pass models through; map ErrorResponse and failed moves to a status."""
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, details=response.details)
        if isinstance(response, MoveResponse) and not response.success:
            return JSONResponse(
                status_code=STATUS_FOR_CODE.get(response.error_code, 400),
                content=response.model_dump(mode="json"),
            )
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Invalid settings"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(request: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session and start round 1.

        If the computer plays the starting mark its opening move is
        already on the board and listed in `moves`.
        """
        api_service.cleanup(NOUGHTS_SESSION_TTL)
        response = await run_in_threadpool(api_service.create_session, request)
        return respond(response)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    # Declared before /{session_id} so "restore" is not taken for an ID
    @app.post(
        "/api/v1/sessions/restore",
        response_model=SessionResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Bad wire string or settings"}},
        tags=["Sessions"],
        summary="Resume a game from a wire snapshot",
    )
    async def restore_session(request: RestoreRequest) -> Union[SessionResponse, JSONResponse]:
        """Create a session whose board is decoded from `wire`."""
        response = await run_in_threadpool(api_service.restore_session, request)
        return respond(response)

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current board, outcome and score of a session."""
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": MoveResponse, "description": "Illegal move"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": MoveResponse, "description": "Not your turn, or round over"},
        },
        tags=["Game"],
        summary="Play a move",
    )
    async def play_move(session_id: str, request: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Place the side-to-move's mark at `index` (row-major).

        The computer's reply, if any, is applied before this returns and
        both moves are listed in `moves`.
        """
        response = await run_in_threadpool(api_service.play_move, session_id, request.index)
        return respond(response)

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=MoveResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start the next round",
    )
    async def reset_session(session_id: str) -> Union[MoveResponse, JSONResponse]:
        """Clear the board, keeping settings and score."""
        response = await run_in_threadpool(api_service.reset_session, session_id)
        return respond(response)

    @app.get(
        "/api/v1/sessions/{session_id}/wire",
        response_model=WireResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the wire form of the board",
    )
    async def get_wire(session_id: str) -> Union[WireResponse, JSONResponse]:
        """Compact `N:K:S:CELLS:L` text, accepted by /sessions/restore."""
        return respond(api_service.get_wire(session_id))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            environment=NOUGHTS_ENV,
            active_sessions=len(api_service.list_sessions()),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Noughts Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn noughts.api.app:app
app = create_app()
