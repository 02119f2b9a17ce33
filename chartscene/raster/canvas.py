from __future__ import annotations

from collections.abc import Iterable

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def _blend(patch: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    inv = 1.0 - a
    src = np.asarray(color[0:3], dtype=np.float32) * a
    patch[..., :3] = (src + patch[..., :3].astype(np.float32) * inv).astype(np.uint8)
    patch[..., 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    _blend(dst[y : y + 1, x : x + 1], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend(dst[y : y + 1, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    _blend(dst[ya : yb + 1, x : x + 1], color)


def fill_rect(dst: np.ndarray, x: int, y: int, width: int, height: int, color: RGBA) -> None:
    if width <= 0 or height <= 0:
        return
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + width)
    y1 = min(dst.shape[0], y + height)
    if x1 <= x0 or y1 <= y0:
        return
    _blend(dst[y0:y1, x0:x1], color)


def fill_polygon(dst: np.ndarray, points: Iterable[tuple[int, int]], color: RGBA) -> None:
    """Scanline fill with the even-odd rule."""
    pts = list(points)
    if len(pts) < 3:
        return
    min_y = max(0, min(y for _, y in pts))
    max_y = min(dst.shape[0] - 1, max(y for _, y in pts))
    edges = list(zip(pts, pts[1:] + pts[:1]))
    for y in range(min_y, max_y + 1):
        intersections: list[int] = []
        for (x0, y0), (x1, y1) in edges:
            if y0 == y1:
                continue
            if min(y0, y1) <= y < max(y0, y1):
                intersections.append(int(round(x0 + (y - y0) * (x1 - x0) / (y1 - y0))))
        intersections.sort()
        for xa, xb in zip(intersections[0::2], intersections[1::2]):
            draw_hline(dst, xa, xb, y, color)
