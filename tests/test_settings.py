"""Tests for adjustment settings coercion."""

import math

import pytest

from designfx.core.constants import AdjustmentKind, CurvesChannel
from designfx.core.settings import (
    DEFAULT_CURVE,
    BlackWhiteSettings,
    CurvesSettings,
    ExposureSettings,
    HueSaturationSettings,
    LevelsSettings,
    SaturationVibranceSettings,
    coerce_settings,
    default_settings,
)


class TestNumericSettings:
    def test_from_dict(self) -> None:
        settings = LevelsSettings.from_dict({"black": 0.1, "mid": 1.2, "white": 0.9})
        assert settings == LevelsSettings(black=0.1, mid=1.2, white=0.9)

    def test_missing_fields_take_defaults(self) -> None:
        assert LevelsSettings.from_dict({"mid": 0.5}) == LevelsSettings(mid=0.5)

    def test_malformed_fields_take_defaults(self) -> None:
        """Test that NaN and non-numeric fields are replaced, not rejected."""
        settings = ExposureSettings.from_dict(
            {"exposure": math.nan, "contrast": "high"}
        )
        assert settings == ExposureSettings()

    def test_partial_recovery(self) -> None:
        settings = HueSaturationSettings.from_dict(
            {"hue": 0.5, "saturation": None, "lightness": math.inf}
        )
        assert settings == HueSaturationSettings(hue=0.5)

    def test_to_dict(self) -> None:
        assert SaturationVibranceSettings(0.2, 0.3).to_dict() == {
            "saturation": 0.2,
            "vibrance": 0.3,
        }
        assert BlackWhiteSettings().to_dict() == {}


class TestCurvesSettings:
    """Test per-channel curve settings."""

    def test_default_points(self) -> None:
        assert CurvesSettings().active_points == DEFAULT_CURVE

    def test_active_channel(self) -> None:
        settings = CurvesSettings.from_dict(
            {
                "channel": "r",
                "points_by_channel": {
                    "rgb": [[0, 0], [0.5, 0.6], [1, 1]],
                    "r": [{"x": 0, "y": 0.1}, {"x": 1, "y": 1}],
                },
            }
        )
        assert settings.channel is CurvesChannel.RED
        assert settings.active_points == ((0, 0.1), (1, 1))

    def test_legacy_points(self) -> None:
        """Test that the single points list is used without a channel entry."""
        settings = CurvesSettings.from_dict(
            {"channel": "g", "points": [[0, 0], [0.4, 0.6], [1, 1]]}
        )
        assert settings.active_points == ((0, 0), (0.4, 0.6), (1, 1))

    def test_camel_case_key(self) -> None:
        settings = CurvesSettings.from_dict(
            {"pointsByChannel": {"rgb": [[0, 0.2], [1, 1]]}}
        )
        assert settings.active_points == ((0, 0.2), (1, 1))

    def test_unknown_channel(self) -> None:
        settings = CurvesSettings.from_dict(
            {"channel": "alpha", "points_by_channel": {"alpha": [[0, 1]]}}
        )
        assert settings.channel is CurvesChannel.RGB
        assert settings.points_by_channel == ()

    def test_with_points(self) -> None:
        settings = CurvesSettings().with_points([(0, 0), (0.5, 0.7), (1, 1)], "b")
        assert settings.channel is CurvesChannel.BLUE
        assert settings.active_points == ((0, 0), (0.5, 0.7), (1, 1))
        assert CurvesSettings().active_points == DEFAULT_CURVE

    def test_to_dict(self) -> None:
        settings = CurvesSettings().with_points([(0, 0), (1, 0.5)])
        assert settings.to_dict() == {
            "channel": "rgb",
            "points_by_channel": {"rgb": [[0, 0], [1, 0.5]]},
        }
        assert CurvesSettings.from_dict(settings.to_dict()) == settings


class TestCoerceSettings:
    @pytest.mark.parametrize("kind", list(AdjustmentKind))
    def test_defaults(self, kind: AdjustmentKind) -> None:
        settings = default_settings(kind)
        assert settings is not None
        assert settings.kind is kind
        assert coerce_settings(kind, None) == settings
        assert coerce_settings(kind, 42) == settings

    def test_instance_kept(self) -> None:
        settings = LevelsSettings(black=0.2)
        assert coerce_settings("levels", settings) is settings

    def test_mapping(self) -> None:
        assert coerce_settings("exposure", {"exposure": 0.5}) == ExposureSettings(
            exposure=0.5
        )

    def test_unknown_kind(self) -> None:
        assert coerce_settings("posterize", {"levels": 4}) is None
        assert default_settings("posterize") is None
