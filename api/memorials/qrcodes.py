"""
Canonical profile URLs and their QR code renderings.

Every memorial is reachable at `{origin}/@{id}`. The origin is APP_BASE_URL
when configured, otherwise the scheme and host the request came in on.
"""

from __future__ import annotations

import base64
import io
import os

import qrcode
from fastapi import Request


def app_base_url() -> str:
    return os.environ.get("APP_BASE_URL", "").strip().rstrip("/")


def request_origin(request: Request) -> str:
    configured = app_base_url()
    if configured:
        return configured
    return f"{request.url.scheme}://{request.url.netloc}"


def profile_url(memorial_id: int, origin: str) -> str:
    return f"{origin.rstrip('/')}/@{memorial_id}"


def render_png(content: str) -> bytes:
    img = qrcode.make(content)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_data_url(content: str) -> str:
    """
    QR code for `content` as an embeddable `data:image/png;base64,...` string.
    """
    encoded = base64.b64encode(render_png(content)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
