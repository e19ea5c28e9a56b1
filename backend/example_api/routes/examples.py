"""
Example API — Example Route Handlers
======================================

What:  Handles GET /api/examples/{id} (fetch) and POST /api/examples (create).
How:   Extracts path/body parameters, delegates to ExampleService, returns JSON.
Who:   Called by API clients and replayed by the markdown fixture harness.

Authentication:
    When `settings.auth_token` is set, GET requires a matching X-Auth-Token
    header (absent → 403, wrong → 401). With no token configured the check is
    skipped. POST is never checked.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from example_api.exceptions import AuthenticationError
from example_api.schemas.example import ErrorResponse, ExampleCreate, ExampleResponse
from example_api.services.example_service import ExampleService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Examples"])


def get_example_service(request: Request) -> ExampleService:
    """Build the service around the app's id generator (set by create_app)."""
    return ExampleService(id_generator=request.app.state.id_generator)


def verify_auth_token(
    request: Request,
    x_auth_token: Optional[str] = Header(default=None),
) -> None:
    """Enforce the optional X-Auth-Token policy for read access."""
    expected = request.app.state.settings.auth_token
    if expected is None:
        return
    if x_auth_token is None:
        raise AuthenticationError(status_code=403, context={"reason": "missing_token"})
    if x_auth_token != expected:
        raise AuthenticationError(status_code=401, context={"reason": "invalid_token"})


@router.get(
    "/examples/{example_id}",
    response_model=ExampleResponse,
    responses={
        200: {"description": "The example", "model": ExampleResponse},
        401: {"description": "Invalid X-Auth-Token", "model": ErrorResponse},
        403: {"description": "Missing X-Auth-Token", "model": ErrorResponse},
        404: {"description": "Example not found", "model": ErrorResponse},
    },
    summary="Get an example by ID",
    dependencies=[Depends(verify_auth_token)],
)
async def get_example(
    example_id: int,
    service: ExampleService = Depends(get_example_service),
) -> ExampleResponse:
    """
    Return the example with the given id.

    Args:
        example_id: Integer path parameter. Non-integers get FastAPI's 422.
    """
    return await service.get_example(example_id)


@router.post(
    "/examples",
    status_code=201,
    response_model=ExampleResponse,
    responses={
        201: {"description": "Example created", "model": ExampleResponse},
    },
    summary="Create an example",
)
async def create_example(
    payload: ExampleCreate,
    service: ExampleService = Depends(get_example_service),
) -> ExampleResponse:
    """Create an example; the id is generated, the title is echoed back."""
    logger.info("Received create request: title=%r", payload.title)
    return await service.create_example(payload.title)
