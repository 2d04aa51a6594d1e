"""
Chat query and text generation Pydantic schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional


class ChatRequest(BaseModel):
    """
    Free-text question.

    Fields are loosely typed on purpose: type problems are reported with
    the API's own error codes instead of a framework validation error.
    """
    query: Optional[Any] = Field(None, description="User question")
    context: Optional[Dict[str, Any]] = Field(
        None, description="Caller preferences, e.g. {'region': 'Karnataka'}"
    )


class QueryResponse(BaseModel):
    type: str = Field(..., description="assessment_data, historical_data, critical_status or no_data")
    region: Optional[str] = None
    data: Any = None
    summary: str


class QueryResult(BaseModel):
    """Envelope for chat-query answers."""
    query: str
    response: QueryResponse
    timestamp: str


class InsightStat(BaseModel):
    label: str
    value: Any
    unit: Optional[str] = None


class ChartSpec(BaseModel):
    type: Literal["bar", "pie", "line"] = "bar"
    title: Optional[str] = None
    xKey: str = "name"
    yKey: str = "value"
    data: List[Dict[str, Any]]


class Insight(BaseModel):
    """Parsed generation output (placeholders when the model gave none)."""
    explanation: str
    stats: List[InsightStat]
    chart: ChartSpec
    placeholder: bool = False


class UpstreamFailure(BaseModel):
    error: str
    code: str
    status: int = 502


class AIChatResponse(BaseModel):
    query: str
    text: str
    insight: Insight
    grounding: Optional[Dict[str, Any]] = None
    upstream: Optional[UpstreamFailure] = None
    timestamp: str
