"""Text classification API."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from text_classifier.nlp import ClassificationResult, InputError, classify_text

logger = logging.getLogger(__name__)

router = APIRouter(tags=["classify"])


class ClassifyRequest(BaseModel):
    """Request body for /classify."""
    # Optional here so a missing field is answered with our 400, not a 422
    text: Optional[str] = Field(
        default=None,
        description="Free-form user request",
        examples=["Order a pizza from Domino's tomorrow at 6pm, ZIP 90210"],
    )


class ErrorResponse(BaseModel):
    error: str


def get_completion_client(request: Request) -> Any:
    """Completion client built at startup (or injected by create_app)."""
    return request.app.state.completion_client


@router.post(
    "/classify",
    response_model=ClassificationResult,
    summary="Classify text",
    description="Returns JSON with the fields zip, brand, category, time_pref",
    responses={
        200: {"description": "Successful classification"},
        400: {"model": ErrorResponse, "description": "Missing text"},
        500: {"model": ErrorResponse, "description": "Upstream or validation failure"},
    },
)
async def classify(
    payload: ClassifyRequest,
    client: Any = Depends(get_completion_client),
):
    """
    Extract zip, brand, category and time preference from free-form text.

    The text is sent to the completion service once; the reply must be the
    four-field JSON object, otherwise the request fails with 500.
    """
    if not payload.text or not payload.text.strip():
        logger.warning("Rejected /classify request without text")
        raise InputError()

    return await classify_text(payload.text, client)
