"""Primitive filter operations.

A filter chain is an ordered sequence of these immutable values. Numeric
parameters are clamped into the operation's domain on construction, so a chain
handed to a renderer never carries out-of-range values. Non-finite inputs fall
back to the operation's neutral value.
"""

import dataclasses
import logging
import math
from typing import Any, ClassVar, Iterable, Mapping, Sequence

from designfx.core.constants import (
    BLUR_RANGE,
    GAMMA_RANGE,
    INTENSITY_RANGE,
    LUT_SIZE,
    NOISE_RANGE,
    PIXELATE_RANGE,
    UNIT_RANGE,
    CurvesChannel,
)

logger = logging.getLogger(__name__)


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp a value into [min_value, max_value]."""
    return max(min_value, min(max_value, value))


def finite_or(value: Any, default: float) -> float:
    """Return value as a float, or default when it is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    value = float(value)
    return value if math.isfinite(value) else default


def _lut_entry(value: Any) -> int:
    """Read one lookup table entry, clamped into [0, 255].

    Raises:
        ValueError: If the entry is not a finite number.
    """
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Lookup table entry {value!r} is not finite")
    return int(clamp(int(number), 0, 255))


class FilterOp:
    """Base class of primitive filter operations."""

    type: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        for field in dataclasses.fields(self):  # type: ignore[arg-type]
            data[field.name] = getattr(self, field.name)
        return data


@dataclasses.dataclass(frozen=True)
class _ScalarOp(FilterOp):
    value: float = 0.0

    domain: ClassVar[tuple[float, float]] = UNIT_RANGE
    neutral: ClassVar[float] = 0.0

    def __post_init__(self) -> None:
        value = finite_or(self.value, self.neutral)
        object.__setattr__(self, "value", clamp(value, *self.domain))


@dataclasses.dataclass(frozen=True)
class Brightness(_ScalarOp):
    type: ClassVar[str] = "Brightness"


@dataclasses.dataclass(frozen=True)
class Contrast(_ScalarOp):
    type: ClassVar[str] = "Contrast"


@dataclasses.dataclass(frozen=True)
class Gamma(_ScalarOp):
    value: float = 1.0

    type: ClassVar[str] = "Gamma"
    domain: ClassVar[tuple[float, float]] = GAMMA_RANGE
    neutral: ClassVar[float] = 1.0


@dataclasses.dataclass(frozen=True)
class HueRotation(_ScalarOp):
    """Hue rotation, where -1 and 1 are half turns."""

    type: ClassVar[str] = "HueRotation"


@dataclasses.dataclass(frozen=True)
class Saturation(_ScalarOp):
    type: ClassVar[str] = "Saturation"


@dataclasses.dataclass(frozen=True)
class Vibrance(_ScalarOp):
    type: ClassVar[str] = "Vibrance"


@dataclasses.dataclass(frozen=True)
class Blur(_ScalarOp):
    type: ClassVar[str] = "Blur"
    domain: ClassVar[tuple[float, float]] = BLUR_RANGE


@dataclasses.dataclass(frozen=True)
class Noise(_ScalarOp):
    type: ClassVar[str] = "Noise"
    domain: ClassVar[tuple[float, float]] = NOISE_RANGE


@dataclasses.dataclass(frozen=True)
class Pixelate(_ScalarOp):
    type: ClassVar[str] = "Pixelate"
    domain: ClassVar[tuple[float, float]] = PIXELATE_RANGE


@dataclasses.dataclass(frozen=True)
class Grayscale(FilterOp):
    type: ClassVar[str] = "Grayscale"


@dataclasses.dataclass(frozen=True)
class Curve(FilterOp):
    """Tone curve given as a 256-entry lookup table."""

    lut: tuple[int, ...]
    channel: CurvesChannel = CurvesChannel.RGB
    intensity: float = 1.0

    type: ClassVar[str] = "Curve"

    def __post_init__(self) -> None:
        lut = tuple(_lut_entry(v) for v in self.lut)
        if len(lut) != LUT_SIZE:
            logger.warning(
                f"Curve lookup table has {len(lut)} entries, using identity"
            )
            lut = tuple(range(LUT_SIZE))
        object.__setattr__(self, "lut", lut)
        try:
            channel = CurvesChannel(self.channel)
        except ValueError:
            logger.warning(f"Unknown curve channel {self.channel!r}, using rgb")
            channel = CurvesChannel.RGB
        object.__setattr__(self, "channel", channel)
        intensity = finite_or(self.intensity, 1.0)
        object.__setattr__(self, "intensity", clamp(intensity, *INTENSITY_RANGE))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "lut": list(self.lut),
            "channel": self.channel.value,
            "intensity": self.intensity,
        }


FILTER_TYPES: dict[str, type[FilterOp]] = {
    cls.type: cls
    for cls in (
        Brightness,
        Contrast,
        Gamma,
        HueRotation,
        Saturation,
        Vibrance,
        Grayscale,
        Curve,
        Blur,
        Noise,
        Pixelate,
    )
}


def filter_from_dict(data: Mapping[str, Any]) -> FilterOp | None:
    """Create a filter op from its dict form, or None if it is not recognized."""
    cls = FILTER_TYPES.get(data.get("type", ""))
    if cls is None:
        logger.warning(f"Unknown filter type {data.get('type')!r}, skipping")
        return None
    if cls is Grayscale:
        return Grayscale()
    try:
        return _create_filter(cls, data)
    except (TypeError, ValueError) as e:
        logger.warning(f"Malformed {cls.type} filter {dict(data)!r}: {e}")
        return None


def _create_filter(cls: type[FilterOp], data: Mapping[str, Any]) -> FilterOp | None:
    if cls is Curve:
        lut = data.get("lut")
        if not isinstance(lut, Sequence) or isinstance(lut, str):
            logger.warning("Curve filter has no lookup table, skipping")
            return None
        return Curve(
            lut=tuple(lut),
            channel=data.get("channel", CurvesChannel.RGB),
            intensity=data.get("intensity", 1.0),
        )
    return cls(value=data.get("value", cls.neutral))  # type: ignore[attr-defined,call-arg]


def filters_from_list(items: Any) -> tuple[FilterOp, ...]:
    """Create a filter chain from a list of dicts, skipping malformed entries."""
    if not isinstance(items, Sequence) or isinstance(items, str):
        return ()
    chain = []
    for item in items:
        if not isinstance(item, Mapping):
            logger.warning(f"Malformed filter entry {item!r}, skipping")
            continue
        op = filter_from_dict(item)
        if op is not None:
            chain.append(op)
    return tuple(chain)


def filters_to_list(chain: Iterable[FilterOp]) -> list[dict[str, Any]]:
    """Serialize a filter chain to a list of dicts."""
    return [op.to_dict() for op in chain]
