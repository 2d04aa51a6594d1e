"""
Text generation service - Gemini prose explanations and chart suggestions.

The model's output is never trusted to be well-formed: ``parse_insight``
looks for a fenced JSON block and falls back to fixed placeholder stats and
chart content when the block is absent, malformed or incomplete.
"""
import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import GenerationConfig

from ingres.config import settings
from ingres.exceptions import UpstreamError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are INGRES AI, a concise, expert assistant on India's groundwater.

- Be accurate, neutral, and cite assumptions when data is missing.
- Prefer structured, scannable answers with headings, bullets, and key metrics.
- If specific regional data is unavailable, say so clearly and suggest what to ask next.
- Avoid fabricating exact figures; if uncertain, provide qualitative guidance.
- Keep responses under 300-500 words unless the user requests more detail.

CRITICAL OUTPUT REQUIREMENTS:
- Respond in the SAME LANGUAGE as the user's query.
- Always include a compact JSON block (fenced with ```json) that the front end can parse for charts and stats.

Example JSON schema (treat as text only, do NOT execute):
```json
{
  "language": "en|hi|<other>",
  "explanation": "short, professional text in user's language",
  "stats": [ { "label": "string", "value": 0, "unit": "string" } ],
  "chart": {
    "type": "bar|pie|line",
    "title": "string",
    "xKey": "name",
    "yKey": "value",
    "data": [ { "name": "Region A", "value": 42 } ]
  }
}
```
""".strip()

CHART_TYPES = ("bar", "pie", "line")

PLACEHOLDER_STATS = [
    {"label": "Extraction Ratio", "value": 92, "unit": "%"},
    {"label": "Recharge Rate", "value": 58, "unit": "mm/yr"},
    {"label": "Critical Units", "value": 12},
]

PLACEHOLDER_CHART = {
    "type": "bar",
    "title": "Demo: Extraction vs Recharge",
    "xKey": "name",
    "yKey": "value",
    "data": [
        {"name": "Extraction", "value": 92},
        {"name": "Recharge", "value": 58},
    ],
}

_FENCED_JSON_RE = re.compile(r"```json\s*\n([\s\S]*?)\n\s*```", re.IGNORECASE)
_TRAILING_OBJECT_RE = re.compile(r"\{[\s\S]*\}\s*$")

TRANSIENT_ERRORS = (
    google_exceptions.ResourceExhausted,
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
)


def compose_prompt(
    query: str,
    context: Optional[Dict[str, Any]] = None,
    grounding: Optional[Dict[str, Any]] = None
) -> str:
    """Single prompt: system preface, user query, caller context and database facts."""
    parts = [SYSTEM_PROMPT, "", f"User query: {query}", ""]
    parts.append(f"Context (if any): {json.dumps(context) if context else 'N/A'}")
    if grounding:
        parts.append("")
        parts.append("Database facts (use these figures, do not invent others):")
        parts.append(json.dumps(grounding, default=str))
    return "\n".join(parts)


def _extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    match = _FENCED_JSON_RE.search(text)
    candidate = match.group(1) if match else None
    if candidate is None:
        trailing = _TRAILING_OBJECT_RE.search(text)
        candidate = trailing.group(0) if trailing else None
    if candidate is None:
        return None

    try:
        parsed = json.loads(candidate)
    except ValueError:
        logger.info("Generated JSON block could not be parsed; using placeholders")
        return None
    return parsed if isinstance(parsed, dict) else None


def _clean_stats(raw: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    stats = []
    for item in raw:
        if not isinstance(item, dict) or "label" not in item or "value" not in item:
            continue
        stat = {"label": str(item["label"]), "value": item["value"]}
        if item.get("unit") is not None:
            stat["unit"] = str(item["unit"])
        stats.append(stat)
    return stats


def _clean_chart(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict) or not isinstance(raw.get("data"), list):
        return None
    chart_type = raw.get("type") if raw.get("type") in CHART_TYPES else "bar"
    return {
        "type": chart_type,
        "title": raw.get("title"),
        "xKey": raw.get("xKey") or "name",
        "yKey": raw.get("yKey") or "value",
        "data": raw["data"],
    }


def parse_insight(text: str) -> Dict[str, Any]:
    """
    Turn generated text into {explanation, stats, chart, placeholder}.

    ``placeholder`` is True when any of stats/chart had to be substituted.
    """
    parsed = _extract_json_block(text or "") or {}

    explanation = parsed.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = text or ""

    stats = _clean_stats(parsed.get("stats"))
    chart = _clean_chart(parsed.get("chart"))

    placeholder = not stats or chart is None
    return {
        "explanation": explanation,
        "stats": stats or [dict(s) for s in PLACEHOLDER_STATS],
        "chart": chart or json.loads(json.dumps(PLACEHOLDER_CHART)),
        "placeholder": placeholder,
    }


def placeholder_insight(explanation: str = "") -> Dict[str, Any]:
    """Insight used when the generation service could not be reached."""
    return parse_insight(explanation)


class TextGenerationClient:
    """Thin Gemini wrapper raising ``UpstreamError`` on every failure."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.is_configured = False
        if self.api_key:
            genai.configure(api_key=self.api_key)
            self.is_configured = True

    def generate(self, prompt: str) -> str:
        """
        Generate text for a composed prompt.

        Transient quota/availability errors are retried with exponential backoff.

        Raises:
            UpstreamError: not configured, non-success response or empty text
        """
        if not self.is_configured:
            raise UpstreamError(
                "GEMINI_API_KEY is not configured on the server",
                code="GENERATION_NOT_CONFIGURED"
            )

        model = genai.GenerativeModel(self.model_name)
        generation_config = GenerationConfig(
            temperature=settings.GEMINI_TEMPERATURE,
            top_p=0.9,
            top_k=40,
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
        )

        max_retries = max(settings.GEMINI_MAX_RETRIES, 1)
        base_delay = 2
        for attempt in range(max_retries):
            try:
                response = model.generate_content(
                    prompt,
                    generation_config=generation_config,
                    request_options={"timeout": settings.GEMINI_TIMEOUT_SECONDS},
                )
                break
            except TRANSIENT_ERRORS as e:
                if attempt < max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(f"Gemini transient error: {e}. Retrying in {delay} seconds...")
                    time.sleep(delay)
                    continue
                raise UpstreamError(f"Gemini API error: {e}") from e
            except google_exceptions.GoogleAPIError as e:
                raise UpstreamError(f"Gemini API error: {e}") from e

        try:
            text = response.text
        except ValueError as e:
            # blocked or candidate-less responses have no text accessor
            raise UpstreamError(f"Gemini returned no usable text: {e}", code="EMPTY_GENERATION") from e

        if not text or not text.strip():
            raise UpstreamError("Empty response from Gemini", code="EMPTY_GENERATION")
        return text


def get_text_generator() -> TextGenerationClient:
    """FastAPI dependency; overridden in tests."""
    return TextGenerationClient()
