"""Translate adjustment settings into primitive filter operations.

Every mapper is a pure function of the coerced settings and the resolved
intensity. Signed values are scaled by intensity and clamped into [-1, 1].
"""

import logging
from typing import Any, Callable

from designfx.core.constants import (
    INTENSITY_RANGE,
    LEVELS_MID_RANGE,
    AdjustmentKind,
    parse_kind,
)
from designfx.core.curves import build_lut
from designfx.core.filters import (
    Brightness,
    Contrast,
    Curve,
    FilterOp,
    Gamma,
    Grayscale,
    HueRotation,
    Saturation,
    Vibrance,
    clamp,
    finite_or,
)
from designfx.core.settings import (
    BlackWhiteSettings,
    CurvesSettings,
    ExposureSettings,
    HueSaturationSettings,
    LevelsSettings,
    SaturationVibranceSettings,
    coerce_settings,
)

logger = logging.getLogger(__name__)


def scaled(value: float, intensity: float) -> float:
    """Scale a signed value by intensity, clamped into [-1, 1]."""
    return clamp(value * intensity, -1.0, 1.0)


def map_curves(settings: CurvesSettings, intensity: float) -> list[FilterOp]:
    lut = build_lut(settings.active_points)
    return [Curve(lut=lut, channel=settings.channel, intensity=intensity)]


def map_levels(settings: LevelsSettings, intensity: float) -> list[FilterOp]:
    black, mid, white = settings.black, settings.mid, settings.white
    return [
        Brightness(scaled((white - 1) - black, intensity)),
        Contrast(scaled(white - black - 1, intensity)),
        Gamma(clamp(mid, *LEVELS_MID_RANGE)),
    ]


def map_hue_saturation(
    settings: HueSaturationSettings, intensity: float
) -> list[FilterOp]:
    ops: list[FilterOp] = []
    if settings.hue != 0:
        ops.append(HueRotation(scaled(settings.hue, intensity)))
    if settings.saturation != 0:
        ops.append(Saturation(scaled(settings.saturation, intensity)))
    if settings.lightness != 0:
        ops.append(Brightness(scaled(settings.lightness, intensity)))
    return ops


def map_exposure(settings: ExposureSettings, intensity: float) -> list[FilterOp]:
    ops: list[FilterOp] = []
    if settings.exposure != 0:
        ops.append(Brightness(scaled(settings.exposure, intensity)))
    if settings.contrast != 0:
        ops.append(Contrast(scaled(settings.contrast, intensity)))
    return ops


def map_saturation_vibrance(
    settings: SaturationVibranceSettings, intensity: float
) -> list[FilterOp]:
    return [
        Saturation(scaled(settings.saturation, intensity)),
        Vibrance(scaled(settings.vibrance, intensity)),
    ]


def map_black_white(settings: BlackWhiteSettings, intensity: float) -> list[FilterOp]:
    return [Grayscale()]


# Registry-based dispatch, one mapper per kind.
MAPPERS: dict[AdjustmentKind, Callable[[Any, float], list[FilterOp]]] = {
    AdjustmentKind.CURVES: map_curves,
    AdjustmentKind.LEVELS: map_levels,
    AdjustmentKind.HUE_SATURATION: map_hue_saturation,
    AdjustmentKind.EXPOSURE: map_exposure,
    AdjustmentKind.SATURATION_VIBRANCE: map_saturation_vibrance,
    AdjustmentKind.BLACK_WHITE: map_black_white,
}


def map_adjustment(
    kind: AdjustmentKind | str, settings: Any, intensity: float
) -> list[FilterOp]:
    """Translate one adjustment into its ordered list of filter operations.

    Args:
        kind: Adjustment kind. Unknown kinds contribute nothing.
        settings: Settings of the kind, a mapping, or anything else, which is
            read as the default settings.
        intensity: Blend factor in [0, 1]. Zero contributes nothing.

    Returns:
        List of primitive filter operations, possibly empty.
    """
    mapper = MAPPERS.get(parse_kind(kind))  # type: ignore[call-overload]
    if mapper is None:
        logger.warning(f"Unknown adjustment kind {kind!r}, skipping")
        return []

    intensity = clamp(finite_or(intensity, 1.0), *INTENSITY_RANGE)
    if intensity <= 0:
        logger.debug(f"Adjustment '{kind}' has zero intensity, skipping")
        return []

    return mapper(coerce_settings(kind, settings), intensity)
