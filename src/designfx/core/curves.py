"""Tone curve interpolation.

Control points are normalized input/output pairs in [0, 1]. They are turned
into a 256-entry lookup table with a Catmull-Rom spline, whose end tangents
reuse the first and last anchors::

    y(t) = 0.5 * (2*p1 + (-p0 + p2)*t + (2*p0 - 5*p1 + 4*p2 - p3)*t^2
                  + (-p0 + 3*p1 - 3*p2 + p3)*t^3)

The curve is always anchored at (0, 0) and (1, 1) unless the user placed
points there. Tables are memoized per distinct point list, as they only need
rebuilding when control points change.
"""

import functools
import logging
import math
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

import numpy as np

from designfx.core.constants import (
    CHANNEL_INDEX,
    LUT_SIZE,
    MASTER_CHANNELS,
    CurvesChannel,
)
from designfx.core.filters import clamp, finite_or

logger = logging.getLogger(__name__)

# Catmull-Rom basis, rows are the coefficients of t^3, t^2, t and 1.
CATMULL_ROM = np.array(
    [
        [-0.5, 1.5, -1.5, 0.5],
        [1.0, -2.5, 2.0, -0.5],
        [-0.5, 0.0, 0.5, 0.0],
        [0.0, 1.0, 0.0, 0.0],
    ]
)

LUT_MAX = LUT_SIZE - 1

IDENTITY_LUT: tuple[int, ...] = tuple(range(LUT_SIZE))


class CurvePoint(NamedTuple):
    """Normalized input to output mapping."""

    x: float
    y: float


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_curve_point(value: Any) -> CurvePoint | None:
    """Read a point given as a pair or as a mapping with x and y keys.

    Returns None for values that are not points or have non-finite coordinates.
    """
    if isinstance(value, Mapping):
        x, y = value.get("x"), value.get("y")
    elif isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        x, y = value
    else:
        return None
    x = finite_or(x, math.nan)
    y = finite_or(y, math.nan)
    if math.isnan(x) or math.isnan(y):
        return None
    return CurvePoint(x, y)


def normalize_points(points: Iterable[Any]) -> tuple[CurvePoint, ...]:
    """Clamp, sort and anchor control points."""
    clamped = []
    for value in points:
        point = to_curve_point(value)
        if point is None:
            logger.debug(f"Ignoring malformed curve point {value!r}")
            continue
        clamped.append(CurvePoint(clamp(point.x, 0.0, 1.0), clamp(point.y, 0.0, 1.0)))
    clamped.sort(key=lambda p: p.x)

    if not clamped or clamped[0] != (0.0, 0.0):
        clamped.insert(0, CurvePoint(0.0, 0.0))
    if clamped[-1] != (1.0, 1.0):
        clamped.append(CurvePoint(1.0, 1.0))
    return tuple(clamped)


def build_lut(points: Iterable[Any]) -> tuple[int, ...]:
    """Build a 256-entry lookup table from curve control points.

    Args:
        points: Control points as (x, y) pairs or {"x", "y"} mappings, both in
            [0, 1]. Out-of-range values are clamped, malformed ones ignored.

    Returns:
        Tuple of 256 integers in [0, 255].
    """
    return _build_lut(normalize_points(points))


@functools.lru_cache(maxsize=256)
def _build_lut(anchors: tuple[CurvePoint, ...]) -> tuple[int, ...]:
    logger.debug(f"Building curve lookup table from {len(anchors)} points")
    values = np.arange(LUT_SIZE, dtype=float) / LUT_MAX

    if len(anchors) == 2:
        # A straight line, which is the identity for the default anchors.
        (x1, y1), (x2, y2) = anchors
        values = np.interp(
            np.arange(LUT_SIZE), [x1 * LUT_MAX, x2 * LUT_MAX], [y1, y2]
        )
    else:
        extended = (anchors[0],) + anchors + (anchors[-1],)
        for i in range(len(anchors) - 1):
            p0, p1, p2, p3 = extended[i : i + 4]
            start = round_half_up(p1.x * LUT_MAX)
            end = round_half_up(p2.x * LUT_MAX)
            if end < start:
                continue
            t = (np.arange(start, end + 1) - start) / max(1, end - start)
            basis = np.stack([t**3, t**2, t, np.ones_like(t)], axis=1)
            values[start : end + 1] = (
                basis @ CATMULL_ROM @ np.array([p0.y, p1.y, p2.y, p3.y])
            )

    table = np.floor(np.clip(values, 0.0, 1.0) * LUT_MAX + 0.5)
    return tuple(int(v) for v in np.clip(table, 0, LUT_MAX))


def blend_lut(lut: Sequence[int], intensity: float) -> np.ndarray:
    """Blend a lookup table with the identity by intensity.

    Returns an array of 256 integer output values.
    """
    intensity = clamp(finite_or(intensity, 1.0), 0.0, 1.0)
    identity = np.arange(LUT_SIZE, dtype=float)
    mapped = np.asarray(lut, dtype=float)
    return np.floor(identity + (mapped - identity) * intensity + 0.5).clip(0, LUT_MAX)


def apply_lut(
    pixels: np.ndarray,
    lut: Sequence[int],
    channel: CurvesChannel | str = CurvesChannel.RGB,
    intensity: float = 1.0,
) -> np.ndarray:
    """Apply a lookup table to an RGB or RGBA pixel array.

    Each affected channel value ``v`` becomes
    ``round(v + (lut[v] - v) * intensity)``. The master channels (rgb and
    luminosity) affect R, G and B; single-color channels only their own.
    Alpha is left untouched. The input array is not modified.

    Args:
        pixels: uint8 array of shape (height, width, 3 or 4).
        lut: 256-entry lookup table.
        channel: Curve channel.
        intensity: Blend factor in [0, 1].

    Returns:
        New uint8 array of the same shape.
    """
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected RGB or RGBA pixels, got shape {pixels.shape}")
    if len(lut) != LUT_SIZE:
        raise ValueError(f"Lookup table must have {LUT_SIZE} entries, got {len(lut)}")

    channel = CurvesChannel(channel)
    table = blend_lut(lut, intensity).astype(np.uint8)
    indices = (0, 1, 2) if channel in MASTER_CHANNELS else (CHANNEL_INDEX[channel],)

    output = pixels.copy()
    for index in indices:
        output[..., index] = table[pixels[..., index]]
    return output
