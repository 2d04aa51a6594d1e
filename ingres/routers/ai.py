"""
Text generation endpoints.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ingres.database import get_db
from ingres.exceptions import UpstreamError
from ingres.schemas import AIChatResponse, ChatRequest, ErrorResponse, QueryResult
from ingres.services import QueryOrchestrator, TextGenerationClient
from ingres.services.export_encoder import utc_timestamp
from ingres.services.query_orchestrator import error_body, error_status, validate_query
from ingres.services.text_generation import (
    compose_prompt,
    get_text_generator,
    parse_insight,
    placeholder_insight,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FALLBACK_EXPLANATION = (
    "The AI assistant is unavailable right now. "
    "Figures below are placeholders; the grounding section holds database facts when available."
)


@router.post(
    "/gemini",
    response_model=QueryResult,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
def gemini_passthrough(
    request: ChatRequest,
    generator: TextGenerationClient = Depends(get_text_generator)
):
    """Plain generated answer; upstream failures surface as 502."""
    query = validate_query(request.query)
    text = generator.generate(compose_prompt(query, request.context))
    return {
        "query": query,
        "response": {"type": "text", "data": None, "summary": text},
        "timestamp": utc_timestamp(),
    }


@router.post(
    "/chat",
    response_model=AIChatResponse,
    responses={400: {"model": ErrorResponse}}
)
def ai_chat(
    request: ChatRequest,
    db: Session = Depends(get_db),
    generator: TextGenerationClient = Depends(get_text_generator)
):
    """
    Generated answer grounded on database facts for the resolved region.

    When generation fails the response still succeeds: the insight falls
    back to placeholders and `upstream` reports the failure.
    """
    query = validate_query(request.query)
    grounding = QueryOrchestrator(db).grounding_for(query, request.context)

    upstream = None
    try:
        text = generator.generate(compose_prompt(query, request.context, grounding))
        insight = parse_insight(text)
    except UpstreamError as e:
        logger.warning("Text generation failed (%s): %s", e.code, e.message)
        text = ""
        insight = placeholder_insight(FALLBACK_EXPLANATION)
        upstream = {**error_body(e), "status": error_status(e)}

    return {
        "query": query,
        "text": text,
        "insight": insight,
        "grounding": grounding,
        "upstream": upstream,
        "timestamp": utc_timestamp(),
    }
