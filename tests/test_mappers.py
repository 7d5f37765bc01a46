"""Tests for the translation of adjustments into filter operations."""

import math

import pytest

from designfx.core.constants import AdjustmentKind, CurvesChannel
from designfx.core.curves import IDENTITY_LUT, build_lut
from designfx.core.filters import (
    Brightness,
    Contrast,
    Curve,
    Gamma,
    Grayscale,
    HueRotation,
    Saturation,
    Vibrance,
)
from designfx.core.mappers import MAPPERS, map_adjustment, scaled
from designfx.core.settings import LevelsSettings


def test_every_kind_has_a_mapper() -> None:
    assert set(MAPPERS) == set(AdjustmentKind)


@pytest.mark.parametrize("kind", list(AdjustmentKind))
def test_zero_intensity_contributes_nothing(kind: AdjustmentKind) -> None:
    assert map_adjustment(kind, None, 0.0) == []
    assert map_adjustment(kind, None, -0.5) == []


def test_unknown_kind_contributes_nothing() -> None:
    assert map_adjustment("posterize", {"levels": 4}, 1.0) == []


def test_scaled() -> None:
    assert scaled(0.5, 0.5) == 0.25
    assert scaled(3.0, 1.0) == 1.0
    assert scaled(-3.0, 0.5) == -1.0


class TestCurves:
    def test_default_curve(self) -> None:
        assert map_adjustment("curves", None, 1.0) == [Curve(IDENTITY_LUT)]

    def test_active_channel_and_intensity(self) -> None:
        points = [[0, 0], [0.5, 0.8], [1, 1]]
        ops = map_adjustment(
            "curves", {"channel": "g", "points_by_channel": {"g": points}}, 0.4
        )
        assert ops == [
            Curve(build_lut(points), channel=CurvesChannel.GREEN, intensity=0.4)
        ]


class TestLevels:
    """Test the levels mapping."""

    def test_defaults(self) -> None:
        assert map_adjustment("levels", None, 1.0) == [
            Brightness(0.0),
            Contrast(0.0),
            Gamma(1.0),
        ]

    def test_black_point(self) -> None:
        ops = map_adjustment("levels", LevelsSettings(black=0.2, white=0.9), 1.0)
        assert ops[0] == Brightness((0.9 - 1) - 0.2)
        assert ops[1] == Contrast(0.9 - 0.2 - 1)

    def test_intensity_scales_brightness_and_contrast(self) -> None:
        ops = map_adjustment("levels", {"black": 0.4, "mid": 1.5}, 0.5)
        assert ops == [Brightness(-0.2), Contrast(-0.2), Gamma(1.5)]

    @pytest.mark.parametrize("mid, expected", [(5.0, 2.0), (0.0, 0.2), (0.7, 0.7)])
    def test_mid_clamped(self, mid: float, expected: float) -> None:
        ops = map_adjustment("levels", {"mid": mid}, 1.0)
        assert ops[2] == Gamma(expected)


class TestHueSaturation:
    def test_neutral(self) -> None:
        assert map_adjustment("hue-saturation", None, 1.0) == []

    def test_all_fields(self) -> None:
        ops = map_adjustment(
            "hue-saturation", {"hue": 0.5, "saturation": -0.4, "lightness": 0.2}, 0.5
        )
        assert ops == [HueRotation(0.25), Saturation(-0.2), Brightness(0.1)]

    def test_only_nonzero_fields(self) -> None:
        ops = map_adjustment("hue-saturation", {"saturation": 0.3}, 1.0)
        assert ops == [Saturation(0.3)]


class TestExposure:
    def test_exposure_only(self) -> None:
        ops = map_adjustment("exposure", {"exposure": 0.5, "contrast": 0}, 0.4)
        assert ops == [Brightness(0.2)]

    def test_contrast(self) -> None:
        ops = map_adjustment("exposure", {"exposure": 2.0, "contrast": -0.5}, 1.0)
        assert ops == [Brightness(1.0), Contrast(-0.5)]

    def test_nan_fields_are_defaults(self) -> None:
        assert map_adjustment("exposure", {"exposure": math.nan}, 1.0) == []


def test_saturation_vibrance_always_emits_both() -> None:
    assert map_adjustment("saturation-vibrance", None, 1.0) == [
        Saturation(0.0),
        Vibrance(0.0),
    ]
    assert map_adjustment(
        "saturation-vibrance", {"saturation": 0.6, "vibrance": -0.4}, 0.5
    ) == [Saturation(0.3), Vibrance(-0.2)]


def test_black_white() -> None:
    assert map_adjustment(AdjustmentKind.BLACK_WHITE, None, 0.3) == [Grayscale()]


def test_nan_intensity_reads_as_full() -> None:
    assert map_adjustment("exposure", {"exposure": 0.5}, math.nan) == [
        Brightness(0.5)
    ]
