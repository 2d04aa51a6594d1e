"""
Chat query endpoint: free-text questions answered from the database.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ingres.database import get_db
from ingres.schemas import ChatRequest, ErrorResponse, QueryResult
from ingres.services import QueryOrchestrator

router = APIRouter()


@router.post(
    "/chat-query",
    response_model=QueryResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def chat_query(request: ChatRequest, db: Session = Depends(get_db)):
    """
    Answer a question such as *"What is the groundwater status in Karnataka?"*.

    The region comes from `context.location`, `context.region`, a known
    region name in the text, or an "in/for/of <name>" phrase. Intent is
    status, historical or critical.
    """
    return QueryOrchestrator(db).answer(request.query, request.context)
