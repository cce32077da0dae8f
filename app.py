import logging
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import CORS_ORIGIN_REGEX, LOG_LEVEL
from data.chart_images import chart_image_url
from logic.validation import TickerValidationError, validate_ticker_form
from services.ai_analysis_service import AnalyzeStockTrendOutput
from services.analysis_service import ActionSuccess, analyze_stock_trend_action

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DISCLAIMER = (
    "MarketSage provides AI-generated analysis for informational purposes only. "
    "It is not financial advice. Always conduct your own research before making investment decisions."
)


app = FastAPI(
    title="MarketSage API",
    description="AI-powered candlestick chart analysis and recommendations for a stock ticker.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AnalyzeRequest(BaseModel):
    ticker: Optional[str] = None


class AnalyzeResponse(BaseModel):
    ticker: str
    chart_image_url: str
    success: bool
    data: Optional[AnalyzeStockTrendOutput] = None
    error: Optional[str] = None
    disclaimer: str = DISCLAIMER


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze_stock(body: AnalyzeRequest) -> AnalyzeResponse:
    """
    Analyze a single stock ticker.

    Validation failures and analysis failures come back the same way:
    success=False with a readable error.
    """
    raw = body.ticker or ""
    logger.info("/api/analyze ticker=%r", raw)

    base = {"ticker": raw.upper(), "chart_image_url": chart_image_url(raw)}

    try:
        validate_ticker_form(raw)
    except TickerValidationError as e:
        return AnalyzeResponse(**base, success=False, error=str(e))

    outcome = analyze_stock_trend_action(raw)

    if isinstance(outcome, ActionSuccess):
        return AnalyzeResponse(**base, success=True, data=outcome.data)
    return AnalyzeResponse(**base, success=False, error=outcome.error or "An unknown error occurred.")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
