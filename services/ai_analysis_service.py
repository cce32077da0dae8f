# services/ai_analysis_service.py

"""
AI chart analysis for MarketSage.

Sends the ticker + chart image (as a data URI) to an OpenAI-compatible
vision model and returns a structured analysis + recommendation.

The module also owns the error boundary for this call:
classify_analysis_error() turns anything the call throws into a
user-facing message.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from openai import OpenAI
from pydantic import BaseModel, Field, ValidationError, field_validator

from config import AI_API_KEY, AI_BASE_URL, AI_MODEL, AI_TEMPERATURE

logger = logging.getLogger(__name__)

GENERIC_ANALYSIS_ERROR = "Failed to analyze stock trend due to an unexpected error."


class AnalyzeStockTrendInput(BaseModel):
    ticker_symbol: str = Field(..., min_length=1, max_length=10)
    chart_data_uri: str = Field(..., description="Chart image as a base64 data URI.")

    @field_validator("chart_data_uri")
    @classmethod
    def _must_be_data_uri(cls, v: str) -> str:
        if not v.startswith("data:") or ";base64," not in v:
            raise ValueError("chart_data_uri must be a base64 data URI.")
        return v


class AnalyzeStockTrendOutput(BaseModel):
    analysis: str = Field(..., description="Free-text analysis of the chart.")
    recommendation: str = Field(..., description="Investment recommendation.")


class AnalysisServiceError(Exception):
    """Structured failure raised by this service (config, empty or malformed model output)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class AnalysisFailure:
    kind: str  # "structured" | "message" | "unknown"
    message: str


SYSTEM_PROMPT = (
    "You are a technical analyst for a stock research app. "
    "You receive a stock ticker and an image of its candlestick chart. "
    "Describe the visible trend and any candlestick or chart patterns you can identify, "
    "then give a short investment recommendation (e.g. Buy, Hold, Sell) with one line of reasoning. "
    "If the image does not show a usable chart, say so in the analysis and base the recommendation "
    "on that limitation. "
    'Respond ONLY with a JSON object of the form {"analysis": "...", "recommendation": "..."}.'
)

_client: Optional[OpenAI] = None


def _get_client() -> OpenAI:
    global _client
    if not AI_API_KEY:
        raise AnalysisServiceError("AI analysis is not configured. Set AI_API_KEY.")
    if _client is None:
        _client = OpenAI(api_key=AI_API_KEY, base_url=AI_BASE_URL)
    return _client


def analyze_stock_trend(payload: AnalyzeStockTrendInput) -> AnalyzeStockTrendOutput:
    """
    Ask the model to analyze the chart for payload.ticker_symbol.

    Raises:
        AnalysisServiceError when the service is not configured or the
        model output is missing/unreadable; openai errors propagate as-is.
    """
    client = _get_client()

    logger.info("[ai_analysis] requesting analysis for %s with model %s", payload.ticker_symbol, AI_MODEL)

    response = client.chat.completions.create(
        model=AI_MODEL,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": f"Ticker symbol: {payload.ticker_symbol}"},
                    {"type": "image_url", "image_url": {"url": payload.chart_data_uri}},
                ],
            },
        ],
        response_format={"type": "json_object"},
        temperature=AI_TEMPERATURE,
    )

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        raise AnalysisServiceError("The AI model returned an empty analysis.")

    try:
        return AnalyzeStockTrendOutput.model_validate_json(content)
    except ValidationError as e:
        logger.warning("[ai_analysis] unreadable model output for %s: %s", payload.ticker_symbol, e)
        raise AnalysisServiceError("The AI model returned an analysis in an unexpected format.") from e


def classify_analysis_error(err: Any) -> AnalysisFailure:
    """
    Map anything thrown by the analysis step onto a user-facing message:

    - an exception with a message   -> that message
    - any object with .message      -> str(obj.message)
    - anything else                 -> generic fallback
    """
    if isinstance(err, BaseException):
        text = str(err).strip()
        if text:
            return AnalysisFailure("structured", text)

    message = getattr(err, "message", None)
    if message is not None and str(message).strip():
        return AnalysisFailure("message", str(message))

    return AnalysisFailure("unknown", GENERIC_ANALYSIS_ERROR)
