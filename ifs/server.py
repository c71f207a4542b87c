"""A little image server for the Newton and Julia renders.

Routes:

- ``/newton``       PNG of Newton's method seeking the 4th roots of unity.
- ``/juliaSingle``  PNG of one Julia set; ``re`` and ``im`` give c.
- ``/julia``        animated GIF; ``parampath`` (Angor, Exp, Wabbit),
                    ``numframes`` and ``numworkers``.

Missing or malformed query values fall back to the defaults below and are
logged. Values that parse but are out of range (``numframes=0``) are answered
with 400.
"""

from __future__ import annotations

import io
import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Optional
from urllib.parse import parse_qs, urlsplit

from .encoding import encode_gif, encode_png
from .engine import render_julia_animation, render_julia_single, render_newton
from .errors import IFSError, RenderPanic
from .paths import PARAMETER_PATHS
from .renderer import REFERENCE_WINDOW, Window

logger = logging.getLogger(__name__)

DEFAULT_RE = -1.25
DEFAULT_IM = 0.0
DEFAULT_PATH = "Angor"
DEFAULT_FRAMES = 64
DEFAULT_WORKERS = 4


def _first(query: dict[str, list[str]], name: str) -> Optional[str]:
    values = query.get(name)
    return values[0] if values else None


def _parsed(query: dict[str, list[str]], name: str, convert: Callable, default):
    raw = _first(query, name)
    try:
        return convert(raw)
    except (TypeError, ValueError):
        logger.info("%s missing or invalid - setting to %s", name, default)
        return default


def julia_single_params(query: dict[str, list[str]]) -> complex:
    re = _parsed(query, "re", float, DEFAULT_RE)
    im = _parsed(query, "im", float, DEFAULT_IM)
    return complex(re, im)


def julia_params(query: dict[str, list[str]]) -> tuple[int, int, str]:
    path_name = _first(query, "parampath")
    if path_name not in PARAMETER_PATHS:
        logger.info("parampath missing or invalid - setting to %s", DEFAULT_PATH)
        path_name = DEFAULT_PATH
    n_frames = _parsed(query, "numframes", int, DEFAULT_FRAMES)
    n_workers = _parsed(query, "numworkers", int, DEFAULT_WORKERS)
    return n_frames, n_workers, path_name


class IFSRequestHandler(BaseHTTPRequestHandler):
    window: Window = REFERENCE_WINDOW
    device: Optional[str] = None

    def do_GET(self) -> None:
        url = urlsplit(self.path)
        query = parse_qs(url.query)
        routes = {
            "/newton": self._newton,
            "/juliaSingle": self._julia_single,
            "/julia": self._julia,
        }
        handler = routes.get(url.path)
        if handler is None:
            self.send_error(HTTPStatus.NOT_FOUND)
            return
        try:
            body, content_type = handler(query)
        except RenderPanic as exc:
            logger.error("render failed: %s", exc)
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
            return
        except IFSError as exc:
            self.send_error(HTTPStatus.BAD_REQUEST, str(exc))
            return

        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _newton(self, query: dict[str, list[str]]) -> tuple[bytes, str]:
        buffer = io.BytesIO()
        encode_png(render_newton(self.window, device=self.device), buffer)
        return buffer.getvalue(), "image/png"

    def _julia_single(self, query: dict[str, list[str]]) -> tuple[bytes, str]:
        buffer = io.BytesIO()
        c = julia_single_params(query)
        encode_png(render_julia_single(c, self.window, device=self.device), buffer)
        return buffer.getvalue(), "image/png"

    def _julia(self, query: dict[str, list[str]]) -> tuple[bytes, str]:
        buffer = io.BytesIO()
        n_frames, n_workers, path_name = julia_params(query)
        sequence = render_julia_animation(n_frames, n_workers, path_name, self.window, device=self.device)
        encode_gif(sequence, buffer)
        return buffer.getvalue(), "image/gif"

    def log_message(self, format: str, *args) -> None:
        logger.info("%s - %s", self.address_string(), format % args)


def make_server(
    host: str = "localhost",
    port: int = 8000,
    *,
    window: Window = REFERENCE_WINDOW,
    device: Optional[str] = None,
) -> ThreadingHTTPServer:
    handler = type("ConfiguredIFSRequestHandler", (IFSRequestHandler,), {"window": window, "device": device})
    return ThreadingHTTPServer((host, port), handler)
