from enum import Enum


class AdjustmentKind(str, Enum):
    """Adjustment layer kinds."""

    CURVES = "curves"
    LEVELS = "levels"
    HUE_SATURATION = "hue-saturation"
    EXPOSURE = "exposure"
    SATURATION_VIBRANCE = "saturation-vibrance"
    BLACK_WHITE = "black-white"


class CurvesChannel(str, Enum):
    """Channels a curve can be edited on."""

    RGB = "rgb"
    LUMINOSITY = "luminosity"
    RED = "r"
    GREEN = "g"
    BLUE = "b"


# Channels whose curve applies to all of R, G and B.
MASTER_CHANNELS = frozenset({CurvesChannel.RGB, CurvesChannel.LUMINOSITY})

# Pixel index of each single-color channel.
CHANNEL_INDEX: dict[CurvesChannel, int] = {
    CurvesChannel.RED: 0,
    CurvesChannel.GREEN: 1,
    CurvesChannel.BLUE: 2,
}

ADJUSTMENT_LABEL: dict[AdjustmentKind, str] = {
    AdjustmentKind.CURVES: "Curves",
    AdjustmentKind.LEVELS: "Levels",
    AdjustmentKind.HUE_SATURATION: "Hue / Saturation",
    AdjustmentKind.EXPOSURE: "Exposure",
    AdjustmentKind.SATURATION_VIBRANCE: "Saturation / Vibrance",
    AdjustmentKind.BLACK_WHITE: "Black & White",
}
DEFAULT_ADJUSTMENT_LABEL = "Adjustment"

LUT_SIZE = 256

# Value domains of the primitive filter operations.
UNIT_RANGE = (-1.0, 1.0)
GAMMA_RANGE = (0.2, 2.2)
INTENSITY_RANGE = (0.0, 1.0)
BLUR_RANGE = (0.0, 1.0)
NOISE_RANGE = (0.0, 1000.0)
PIXELATE_RANGE = (0.0, 20.0)

# Domain the levels midtone is clamped into before it becomes a gamma op.
LEVELS_MID_RANGE = (0.2, 2.0)


def parse_kind(value: "AdjustmentKind | str") -> "AdjustmentKind | str":
    """Return the matching AdjustmentKind, or the raw string when unknown."""
    try:
        return AdjustmentKind(value)
    except ValueError:
        return value if isinstance(value, str) else repr(value)


def get_adjustment_label(kind: "AdjustmentKind | str | None") -> str:
    """Human readable label of an adjustment kind."""
    if kind is None:
        return DEFAULT_ADJUSTMENT_LABEL
    return ADJUSTMENT_LABEL.get(parse_kind(kind), DEFAULT_ADJUSTMENT_LABEL)  # type: ignore[call-overload]
