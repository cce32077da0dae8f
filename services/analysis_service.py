# services/analysis_service.py

"""
High-level analysis service for MarketSage.

This module is the "orchestra conductor" that coordinates:
- validation
- chart image fetching
- AI analysis

It exposes a single main function:

    analyze_stock_trend_action(ticker_symbol: str) -> ActionOutcome

which the API calls to get everything it needs in one shot.
Every failure is returned as {"success": False, "error": ...}; nothing raises.
"""

import logging
from typing import Literal, Union

from pydantic import BaseModel

from logic.validation import TickerValidationError, validate_ticker
from data.chart_images import resolve_chart_image
from services.ai_analysis_service import (
    AnalyzeStockTrendInput,
    AnalyzeStockTrendOutput,
    analyze_stock_trend,
    classify_analysis_error,
)

logger = logging.getLogger(__name__)


class ActionSuccess(BaseModel):
    success: Literal[True] = True
    data: AnalyzeStockTrendOutput


class ActionFailure(BaseModel):
    success: Literal[False] = False
    error: str


ActionOutcome = Union[ActionSuccess, ActionFailure]


def analyze_stock_trend_action(ticker_symbol: str) -> ActionOutcome:
    """
    Run the full pipeline for one ticker:
    validate -> resolve chart image -> AI analysis.

    Invalid tickers are rejected before any network call.
    """
    try:
        # 1) Validation
        try:
            symbol = validate_ticker(ticker_symbol)
        except TickerValidationError as e:
            return ActionFailure(error=str(e))

        # 2) Chart image (never raises, worst case is a static pixel)
        chart = resolve_chart_image(symbol)

        # 3) AI analysis
        output = analyze_stock_trend(
            AnalyzeStockTrendInput(ticker_symbol=symbol, chart_data_uri=chart.data_uri)
        )
        return ActionSuccess(data=output)

    except Exception as e:
        logger.exception("[analysis_service] analysis failed for %r", ticker_symbol)
        failure = classify_analysis_error(e)
        return ActionFailure(error=failure.message)
