"""Adjustment settings.

Each adjustment kind has an immutable settings type. Settings coming from
editors or documents are coerced field by field: a missing, non-numeric or
NaN field takes the kind's default instead of being rejected.
"""

import dataclasses
import logging
from typing import Any, ClassVar, Mapping, Sequence, Union

from designfx.core.constants import AdjustmentKind, CurvesChannel, parse_kind
from designfx.core.curves import CurvePoint, to_curve_point
from designfx.core.filters import finite_or

logger = logging.getLogger(__name__)

DEFAULT_CURVE: tuple[CurvePoint, ...] = (CurvePoint(0.0, 0.0), CurvePoint(1.0, 1.0))


def _read_points(value: Any) -> tuple[CurvePoint, ...] | None:
    if not isinstance(value, Sequence) or isinstance(value, str):
        return None
    points = [to_curve_point(item) for item in value]
    return tuple(p for p in points if p is not None)


@dataclasses.dataclass(frozen=True)
class _NumericSettings:
    """Settings made of plain numeric fields."""

    kind: ClassVar[AdjustmentKind]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "_NumericSettings":
        defaults = cls()
        values = {}
        for field in dataclasses.fields(cls):
            default = getattr(defaults, field.name)
            value = finite_or(data.get(field.name), default)
            if field.name in data and value != data.get(field.name):
                logger.debug(
                    f"{cls.kind.value} setting {field.name}={data.get(field.name)!r} "
                    f"is not a finite number, using {default}"
                )
            values[field.name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True)
class LevelsSettings(_NumericSettings):
    black: float = 0.0
    mid: float = 1.0
    white: float = 1.0

    kind: ClassVar[AdjustmentKind] = AdjustmentKind.LEVELS


@dataclasses.dataclass(frozen=True)
class HueSaturationSettings(_NumericSettings):
    hue: float = 0.0
    saturation: float = 0.0
    lightness: float = 0.0

    kind: ClassVar[AdjustmentKind] = AdjustmentKind.HUE_SATURATION


@dataclasses.dataclass(frozen=True)
class ExposureSettings(_NumericSettings):
    exposure: float = 0.0
    contrast: float = 0.0

    kind: ClassVar[AdjustmentKind] = AdjustmentKind.EXPOSURE


@dataclasses.dataclass(frozen=True)
class SaturationVibranceSettings(_NumericSettings):
    saturation: float = 0.0
    vibrance: float = 0.0

    kind: ClassVar[AdjustmentKind] = AdjustmentKind.SATURATION_VIBRANCE


@dataclasses.dataclass(frozen=True)
class BlackWhiteSettings(_NumericSettings):
    kind: ClassVar[AdjustmentKind] = AdjustmentKind.BLACK_WHITE


@dataclasses.dataclass(frozen=True)
class CurvesSettings:
    """Per-channel curve points and the channel being edited.

    ``points`` is the single curve kept by older documents; it is used when the
    active channel has no entry of its own in ``points_by_channel``.
    """

    points_by_channel: tuple[tuple[CurvesChannel, tuple[CurvePoint, ...]], ...] = ()
    channel: CurvesChannel = CurvesChannel.RGB
    points: tuple[CurvePoint, ...] | None = None

    kind: ClassVar[AdjustmentKind] = AdjustmentKind.CURVES

    @property
    def active_points(self) -> tuple[CurvePoint, ...]:
        """Control points of the active channel."""
        by_channel = dict(self.points_by_channel)
        if self.channel in by_channel:
            return by_channel[self.channel]
        if self.points is not None:
            return self.points
        return DEFAULT_CURVE

    def with_points(
        self, points: Sequence[Any], channel: CurvesChannel | str | None = None
    ) -> "CurvesSettings":
        """Return a copy with the points of one channel replaced."""
        channel = CurvesChannel(channel) if channel is not None else self.channel
        by_channel = dict(self.points_by_channel)
        by_channel[channel] = _read_points(points) or DEFAULT_CURVE
        return dataclasses.replace(
            self,
            channel=channel,
            points_by_channel=tuple(sorted(by_channel.items(), key=_channel_order)),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CurvesSettings":
        try:
            channel = CurvesChannel(data.get("channel", CurvesChannel.RGB))
        except ValueError:
            logger.debug(f"Unknown curve channel {data.get('channel')!r}, using rgb")
            channel = CurvesChannel.RGB

        by_channel: dict[CurvesChannel, tuple[CurvePoint, ...]] = {}
        raw = data.get("points_by_channel", data.get("pointsByChannel"))
        if isinstance(raw, Mapping):
            for key, value in raw.items():
                try:
                    key = CurvesChannel(key)
                except ValueError:
                    logger.debug(f"Ignoring curve for unknown channel {key!r}")
                    continue
                points = _read_points(value)
                if points is not None:
                    by_channel[key] = points
        return cls(
            points_by_channel=tuple(sorted(by_channel.items(), key=_channel_order)),
            channel=channel,
            points=_read_points(data.get("points")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "channel": self.channel.value,
            "points_by_channel": {
                channel.value: [list(p) for p in points]
                for channel, points in self.points_by_channel
            },
        }
        if self.points is not None:
            data["points"] = [list(p) for p in self.points]
        return data


def _channel_order(item: tuple[CurvesChannel, Any]) -> int:
    return list(CurvesChannel).index(item[0])


AdjustmentSettings = Union[
    CurvesSettings,
    LevelsSettings,
    HueSaturationSettings,
    ExposureSettings,
    SaturationVibranceSettings,
    BlackWhiteSettings,
]

SETTINGS_TYPES: dict[AdjustmentKind, Any] = {
    AdjustmentKind.CURVES: CurvesSettings,
    AdjustmentKind.LEVELS: LevelsSettings,
    AdjustmentKind.HUE_SATURATION: HueSaturationSettings,
    AdjustmentKind.EXPOSURE: ExposureSettings,
    AdjustmentKind.SATURATION_VIBRANCE: SaturationVibranceSettings,
    AdjustmentKind.BLACK_WHITE: BlackWhiteSettings,
}


def default_settings(kind: AdjustmentKind | str) -> AdjustmentSettings | None:
    """Default settings of an adjustment kind, or None for unknown kinds."""
    settings_type = SETTINGS_TYPES.get(parse_kind(kind))  # type: ignore[call-overload]
    return settings_type() if settings_type is not None else None


def coerce_settings(kind: AdjustmentKind | str, value: Any) -> AdjustmentSettings | None:
    """Coerce settings of any shape to the settings type of the kind.

    Instances of the right type are returned as is, mappings are read field by
    field, and anything else becomes the default settings. Unknown kinds give
    None.
    """
    settings_type = SETTINGS_TYPES.get(parse_kind(kind))  # type: ignore[call-overload]
    if settings_type is None:
        return None
    if isinstance(value, settings_type):
        return value
    if isinstance(value, Mapping):
        return settings_type.from_dict(value)
    if value is not None:
        logger.debug(
            f"Malformed {settings_type.kind.value} settings {value!r}, using defaults"
        )
    return settings_type()
