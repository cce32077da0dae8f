# test/test_chart_images.py

"""
Tests for data/chart_images.py

A fake session replays scripted responses (or raises) so no test
touches the real placeholder service.
"""

import base64
from typing import Any, Dict, List, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict

import data.chart_images as chart_images
from data.chart_images import TRANSPARENT_PIXEL, ImagePayload, chart_image_url, resolve_chart_image

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = PNG_BYTES, content_type: Optional[str] = "image/png"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self.reason = "OK" if self.ok else "Bad"
        self.content = content
        self.headers = CaseInsensitiveDict()
        if content_type is not None:
            self.headers["Content-Type"] = content_type


class FakeSession:
    """Returns (or raises) the scripted items in order and records every call."""

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def labels(self) -> List[str]:
        return [c["params"]["text"] for c in self.calls]


def test_primary_success_makes_one_call():
    session = FakeSession([FakeResponse(content_type="image/jpeg")])

    payload = resolve_chart_image("AAPL", session=session)

    assert session.labels() == ["AAPL Chart"]
    assert payload.mime_type == "image/jpeg"
    assert base64.b64decode(payload.base64_data) == PNG_BYTES
    assert payload.data_uri.startswith("data:image/jpeg;base64,")


def test_missing_content_type_defaults_to_png():
    session = FakeSession([FakeResponse(content_type=None)])

    payload = resolve_chart_image("MSFT", session=session)

    assert payload.mime_type == "image/png"


def test_bad_status_uses_error_labelled_image():
    session = FakeSession([FakeResponse(status_code=500), FakeResponse()])

    payload = resolve_chart_image("TSLA", session=session)

    assert session.labels() == ["TSLA Chart", "Error Loading Chart For TSLA"]
    assert base64.b64decode(payload.base64_data) == PNG_BYTES


def test_transport_error_skips_to_generic_image():
    session = FakeSession([requests.ConnectionError("boom"), FakeResponse()])

    payload = resolve_chart_image("NVDA", session=session)

    assert session.labels() == ["NVDA Chart", "Chart Unavailable"]
    assert payload != TRANSPARENT_PIXEL


def test_error_labelled_failure_falls_to_generic_image():
    session = FakeSession([FakeResponse(status_code=404), FakeResponse(status_code=503), FakeResponse()])

    resolve_chart_image("AMD", session=session)

    assert session.labels() == ["AMD Chart", "Error Loading Chart For AMD", "Chart Unavailable"]


def test_empty_body_is_treated_as_failure():
    session = FakeSession([FakeResponse(content=b""), FakeResponse()])

    payload = resolve_chart_image("IBM", session=session)

    assert session.labels() == ["IBM Chart", "Chart Unavailable"]
    assert payload.base64_data


@pytest.mark.parametrize(
    "script",
    [
        [requests.Timeout("slow"), requests.ConnectionError("down")],
        [FakeResponse(status_code=500), requests.ConnectionError("down"), FakeResponse(status_code=502)],
        [RuntimeError("unexpected"), RuntimeError("unexpected")],
    ],
)
def test_every_tier_failing_returns_static_pixel(script):
    session = FakeSession(script)

    payload = resolve_chart_image("GOOG", session=session)

    assert payload == TRANSPARENT_PIXEL
    assert payload.mime_type == "image/png"
    assert payload.base64_data
    assert session.script == []


def test_timeout_zero_means_no_timeout(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(chart_images, "IMAGE_FETCH_TIMEOUT_SECONDS", 0.0)
    session = FakeSession([FakeResponse()])
    resolve_chart_image("AAPL", session=session)
    assert session.calls[0]["timeout"] is None

    monkeypatch.setattr(chart_images, "IMAGE_FETCH_TIMEOUT_SECONDS", 7.5)
    session = FakeSession([FakeResponse()])
    resolve_chart_image("AAPL", session=session)
    assert session.calls[0]["timeout"] == 7.5


def test_data_uri_format():
    payload = ImagePayload(mime_type="image/png", base64_data="abc=")
    assert payload.data_uri == "data:image/png;base64,abc="


def test_chart_image_url_labels_the_symbol():
    assert chart_image_url("AAPL") == "https://placehold.co/800x400.png?text=AAPL+Chart"
