from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
from pathlib import Path
from typing import Sequence

from chartscene.dispatch import render
from chartscene.errors import UnknownChartType
from chartscene.style import ChartStyle, load_style
from chartscene.targets import RasterTarget, SceneBuffer, SceneTarget, SvgTarget


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chartscene")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("render", help="Render a categorical JSON payload to SVG, PNG or a scene summary.")
    run.add_argument("payload", type=Path, help="JSON file: {categories: [...], values: [{name, values}, ...]}")
    run.add_argument("--chart-type", default=None, help="Pie, Bar, BarWithMarker or Line.")
    run.add_argument("--config", type=Path, default=None, help="TOML chart style ([chart] table).")
    run.add_argument("--width", type=int, default=None)
    run.add_argument("--height", type=int, default=None)
    run.add_argument("--out", type=Path, default=None, help="Output .svg or .png; prints a JSON summary when omitted.")
    run.add_argument("--log-level", default="WARNING")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    if args.command == "render":
        return _run_render(args)
    return 2


def _run_render(args: argparse.Namespace) -> int:
    try:
        style = _style_for(args)
        payload = json.loads(args.payload.read_text(encoding="utf-8"))
        target = _target_for(args.out, style)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}")
        return 2

    try:
        scene = render(target, payload, args.chart_type, style)
    except UnknownChartType as exc:
        print(f"error: {exc}")
        return 2
    if scene is None:
        print("nothing rendered: payload has no usable categorical data")
        return 1

    if isinstance(target, SvgTarget):
        target.save(args.out)
        print(f"wrote {args.out}")
    elif isinstance(target, RasterTarget):
        target.save_png(args.out)
        print(f"wrote {args.out}")
    else:
        summary = {
            "width": scene.width,
            "height": scene.height,
            "elements": [{"type": type(e).__name__, **asdict(e)} for e in scene.elements],
        }
        print(json.dumps(summary, indent=2))
    return 0


def _style_for(args: argparse.Namespace) -> ChartStyle:
    style = load_style(args.config) if args.config is not None else ChartStyle()
    changes: dict[str, int] = {}
    if args.width is not None:
        changes["canvas_width"] = args.width
    if args.height is not None:
        changes["canvas_height"] = args.height
    if changes:
        style = style.replace(**changes)
    return style


def _target_for(out: Path | None, style: ChartStyle) -> SceneTarget:
    if out is None:
        return SceneBuffer()
    suffix = out.suffix.lower()
    if suffix == ".svg":
        return SvgTarget(font_size_px=style.font_size_px, text_color=style.text_color)
    if suffix == ".png":
        return RasterTarget(font_size_px=style.font_size_px, text_color=style.text_color)
    raise ValueError(f"unsupported output format: {out.suffix or out.name}")
