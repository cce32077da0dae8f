"""
data/chart_images.py
Responsible for fetching the placeholder chart image for a ticker.

The image service is treated as unreliable, so the resolver walks an
ordered list of tiers and always ends with a hardcoded pixel:

    1. primary        "<SYMBOL> Chart"
    2. error-labelled "Error Loading Chart For <SYMBOL>"  (only after a bad HTTP status)
    3. generic        "Chart Unavailable"                  (after any other failure)
    4. static         1x1 transparent PNG

resolve_chart_image() never raises.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Union

import requests

from config import IMAGE_FETCH_TIMEOUT_SECONDS, PLACEHOLDER_CHART_URL

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"

# Failure reasons
HTTP_STATUS = "http_status"
TRANSPORT = "transport"
EMPTY_BODY = "empty_body"

ALL_REASONS: FrozenSet[str] = frozenset({HTTP_STATUS, TRANSPORT, EMPTY_BODY})


@dataclass(frozen=True)
class ImagePayload:
    mime_type: str
    base64_data: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


@dataclass(frozen=True)
class FetchFailure:
    reason: str
    detail: str


FetchResult = Union[ImagePayload, FetchFailure]


@dataclass(frozen=True)
class ChartTier:
    name: str
    label: Callable[[str], str]
    # failure reasons of the previous attempt that allow this tier to run
    runs_after: FrozenSet[str]


TIERS: List[ChartTier] = [
    ChartTier("primary", lambda symbol: f"{symbol} Chart", ALL_REASONS),
    ChartTier("error_labelled", lambda symbol: f"Error Loading Chart For {symbol}", frozenset({HTTP_STATUS})),
    ChartTier("generic", lambda symbol: "Chart Unavailable", ALL_REASONS),
]

# 1x1 transparent PNG
TRANSPARENT_PIXEL = ImagePayload(
    mime_type=DEFAULT_MIME_TYPE,
    base64_data="iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII=",
)


def _timeout() -> Optional[float]:
    return IMAGE_FETCH_TIMEOUT_SECONDS if IMAGE_FETCH_TIMEOUT_SECONDS > 0 else None


def chart_image_url(symbol: str) -> str:
    """
    Display URL of the primary chart for a ticker, e.g.
    https://placehold.co/800x400.png?text=AAPL+Chart
    """
    prepared = requests.Request("GET", PLACEHOLDER_CHART_URL, params={"text": f"{symbol} Chart"}).prepare()
    return prepared.url or PLACEHOLDER_CHART_URL


def fetch_placeholder_image(session: requests.Session, label: str) -> FetchResult:
    """
    One GET against the placeholder service.
    Returns an ImagePayload on a 2xx with a body, otherwise a FetchFailure.
    """
    try:
        response = session.get(PLACEHOLDER_CHART_URL, params={"text": label}, timeout=_timeout())
    except Exception as e:
        return FetchFailure(TRANSPORT, repr(e))

    if not response.ok:
        return FetchFailure(HTTP_STATUS, f"{response.status_code} {response.reason}")

    content = response.content or b""
    if not content:
        return FetchFailure(EMPTY_BODY, "empty image body")

    mime_type = response.headers.get("content-type") or DEFAULT_MIME_TYPE
    return ImagePayload(mime_type=mime_type, base64_data=base64.b64encode(content).decode("ascii"))


def resolve_chart_image(symbol: str, session: Optional[requests.Session] = None) -> ImagePayload:
    """
    Walk the tiers in order until one yields an image.

    A tier is skipped when the previous attempt failed for a reason it
    does not handle (the error-labelled tier only follows a bad HTTP status).
    """
    http = session or requests.Session()
    failure: Optional[FetchFailure] = None

    try:
        for tier in TIERS:
            if failure is not None and failure.reason not in tier.runs_after:
                continue

            result = fetch_placeholder_image(http, tier.label(symbol))
            if isinstance(result, ImagePayload):
                return result

            logger.warning("[chart_images] %s tier failed for %s: %s (%s)", tier.name, symbol, result.reason, result.detail)
            failure = result
    finally:
        if session is None:
            http.close()

    logger.error("[chart_images] all tiers failed for %s, using static pixel", symbol)
    return TRANSPARENT_PIXEL
