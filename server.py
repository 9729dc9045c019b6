"""Flask app serving one PNG endpoint per variant."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable

from flask import Flask, Response, abort, jsonify, request

from fonts import FontLoader
from layout import plan_for
from renderer import PillowRasterizer, Rasterizer
from settings import default_settings, load_settings
from variants import VARIANTS, list_variants

log = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=0, must-revalidate"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_dimension(value: str | None, fallback: int, limit: int) -> int:
    """Parse the leading integer of a size parameter ("800px" -> 800).

    Missing, malformed, non-positive or over-``limit`` values give ``fallback``.
    """
    if value is None:
        return fallback
    m = _LEADING_INT.match(value)
    if not m:
        return fallback
    n = int(m.group(1))
    if n <= 0 or n > limit:
        return fallback
    return n


def create_app(
    settings: dict | None = None,
    clock: Callable[[], datetime] | None = None,
    rasterizer: Rasterizer | None = None,
) -> Flask:
    """Build the app. ``clock`` and ``rasterizer`` are injectable for tests."""
    settings = {**default_settings(), **(settings if settings is not None else load_settings())}
    clock = clock or (lambda: datetime.now().astimezone())
    if rasterizer is None:
        rasterizer = PillowRasterizer(FontLoader(settings["font_regular"], settings["font_italic"]))

    app = Flask(__name__)

    @app.route("/api/<name>", methods=["GET"])
    def progress_image(name: str) -> Response:
        if name not in VARIANTS:
            abort(404)
        variant = VARIANTS[name]
        limit = settings["max_dimension"]
        width = parse_dimension(request.args.get("width"), settings["default_width"], limit)
        height = parse_dimension(request.args.get("height"), settings["default_height"], limit)

        plan = plan_for(variant, width, height, rasterizer.measure,
                        now=clock(), default_tz=settings["timezone"])
        log.debug("Rendering %s at %dx%d, day %d/%d", name, width, height,
                  plan.progress.day_of_year, plan.progress.total_days)
        try:
            png = rasterizer.render(plan)
        except Exception:
            log.exception("Rasterizing %s at %dx%d failed", name, width, height)
            raise

        resp = Response(png, mimetype="image/png")
        resp.headers["Cache-Control"] = CACHE_CONTROL
        return resp

    @app.route("/api", methods=["GET"])
    def index():
        return jsonify({
            "variants": [
                {
                    "name": n,
                    "path": VARIANTS[n].path,
                    "grid": VARIANTS[n].grid.value,
                    "timezone": VARIANTS[n].timezone,
                }
                for n in list_variants()
            ],
        })

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return jsonify({"ok": True})

    return app
