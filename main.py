"""Entry point: serve the PNG endpoints or render one variant to a file."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from calendar_logic import progress_for_date
from fonts import FontLoader
from layout import build_plan, plan_for
from renderer import PillowRasterizer
from settings import load_settings, save_settings, settings_path
from variants import get_variant, list_variants

log = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def cmd_serve(args: argparse.Namespace, settings: dict) -> int:
    from server import create_app

    host = args.host or settings["host"]
    port = args.port or settings["port"]
    app = create_app(settings)
    log.info("Serving %s on http://%s:%d/api/<variant>", ", ".join(list_variants()), host, port)
    app.run(host=host, port=port, debug=False)
    return 0


def cmd_render(args: argparse.Namespace, settings: dict) -> int:
    variant = get_variant(args.variant)
    width = args.width or settings["default_width"]
    height = args.height or settings["default_height"]
    rasterizer = PillowRasterizer(FontLoader(settings["font_regular"], settings["font_italic"]))
    if args.date:
        progress = progress_for_date(_parse_ymd(args.date))
        plan = build_plan(variant, width, height, progress, rasterizer.measure)
    else:
        plan = plan_for(variant, width, height, rasterizer.measure,
                        default_tz=settings["timezone"])
    out = args.out or f"{variant.name}.png"
    with open(out, "wb") as f:
        f.write(rasterizer.render(plan))
    p = plan.progress
    print(f"{out}: day {p.day_of_year}/{p.total_days} ({p.percentage}%)")
    return 0


def cmd_variants(args: argparse.Namespace, settings: dict) -> int:
    for name in list_variants():
        v = get_variant(name)
        print(f"{v.path:<20} {v.grid.value:<7} {v.timezone or 'local'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="year-progress", description="Year progress PNG renderer")
    p.add_argument("--settings", help="settings JSON (default: %s)" % settings_path())
    p.add_argument("--write-settings", action="store_true",
                   help="write the effective settings back to the settings file")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("serve", help="run the HTTP server")
    s.add_argument("--host")
    s.add_argument("--port", type=int)
    s.set_defaults(func=cmd_serve)

    r = sub.add_parser("render", help="render one variant to a PNG file")
    r.add_argument("variant", choices=list_variants())
    r.add_argument("--width", type=int)
    r.add_argument("--height", type=int)
    r.add_argument("--date", help="YYYY-MM-DD (default: today)")
    r.add_argument("--out", help="output path (default: <variant>.png)")
    r.set_defaults(func=cmd_render)

    v = sub.add_parser("variants", help="list the registered variants")
    v.set_defaults(func=cmd_variants)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.settings)
    _setup_logging(settings["log_level"])
    if args.write_settings:
        save_settings(settings, args.settings)
        log.info("Wrote settings to %s", args.settings or settings_path())
    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
