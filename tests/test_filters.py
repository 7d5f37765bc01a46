"""Tests for primitive filter operations."""

import math

import pytest

from designfx.core.constants import CurvesChannel
from designfx.core.filters import (
    Blur,
    Brightness,
    Contrast,
    Curve,
    Gamma,
    Grayscale,
    HueRotation,
    Noise,
    Pixelate,
    Saturation,
    Vibrance,
    clamp,
    filter_from_dict,
    filters_from_list,
    filters_to_list,
    finite_or,
)


class TestClamping:
    """Test that every op clamps its parameters into its domain."""

    @pytest.mark.parametrize(
        "op_type", [Brightness, Contrast, HueRotation, Saturation, Vibrance]
    )
    def test_unit_domain(self, op_type: type) -> None:
        assert op_type(2.5).value == 1.0
        assert op_type(-3).value == -1.0
        assert op_type(0.25).value == 0.25

    @pytest.mark.parametrize(
        "op, expected",
        [
            (Gamma(5.0), 2.2),
            (Gamma(0.0), 0.2),
            (Gamma(math.nan), 1.0),
            (Blur(3.0), 1.0),
            (Noise(2000), 1000.0),
            (Noise(-1), 0.0),
            (Pixelate(25), 20.0),
            (Brightness(math.inf), 0.0),
            (Saturation(math.nan), 0.0),
        ],
    )
    def test_domains(self, op: object, expected: float) -> None:
        assert op.value == expected  # type: ignore[attr-defined]

    def test_default_values_are_neutral(self) -> None:
        assert Brightness().value == 0.0
        assert Gamma().value == 1.0

    def test_curve_intensity(self) -> None:
        lut = tuple(range(256))
        assert Curve(lut, intensity=1.5).intensity == 1.0
        assert Curve(lut, intensity=-1).intensity == 0.0
        assert Curve(lut, intensity=math.nan).intensity == 1.0

    def test_curve_lut_values(self) -> None:
        lut = Curve(tuple([300] * 128 + [-4] * 128)).lut
        assert lut[0] == 255
        assert lut[255] == 0

    @pytest.mark.parametrize("entry", [math.inf, -math.inf, math.nan, None, "dark"])
    def test_curve_invalid_entry(self, entry: object) -> None:
        lut = [0] * 255 + [entry]
        with pytest.raises((TypeError, ValueError)):
            Curve(tuple(lut))

    def test_curve_wrong_length(self) -> None:
        """Test that a table of the wrong length becomes the identity."""
        assert Curve((1, 2, 3)).lut == tuple(range(256))

    def test_curve_channel(self) -> None:
        lut = tuple(range(256))
        assert Curve(lut, channel="g").channel is CurvesChannel.GREEN
        assert Curve(lut, channel="alpha").channel is CurvesChannel.RGB


class TestValueSemantics:
    def test_equality(self) -> None:
        assert Brightness(0.5) == Brightness(0.5)
        assert Brightness(0.5) != Contrast(0.5)
        assert Grayscale() == Grayscale()

    def test_hashable(self) -> None:
        lut = tuple(range(256))
        ops = {Brightness(0.5), Brightness(0.5), Curve(lut), Curve(list(lut))}
        assert len(ops) == 2

    def test_frozen(self) -> None:
        op = Brightness(0.5)
        with pytest.raises(AttributeError):
            op.value = 0.1  # type: ignore[misc]


class TestSerialization:
    """Test the dict form of filter chains."""

    def test_scalar_to_dict(self) -> None:
        assert Brightness(0.5).to_dict() == {"type": "Brightness", "value": 0.5}
        assert Grayscale().to_dict() == {"type": "Grayscale"}

    def test_curve_to_dict(self) -> None:
        data = Curve(tuple(range(256)), channel="r", intensity=0.5).to_dict()
        assert data["type"] == "Curve"
        assert data["channel"] == "r"
        assert data["intensity"] == 0.5
        assert data["lut"] == list(range(256))

    def test_chain(self) -> None:
        chain = (Brightness(0.1), Grayscale(), Pixelate(4), Curve(tuple(range(256))))
        assert filters_from_list(filters_to_list(chain)) == chain

    def test_unknown_type(self) -> None:
        assert filter_from_dict({"type": "Sepia"}) is None

    def test_missing_value_is_neutral(self) -> None:
        assert filter_from_dict({"type": "Gamma"}) == Gamma(1.0)

    def test_malformed_curve(self) -> None:
        assert filter_from_dict({"type": "Curve"}) is None
        assert filter_from_dict({"type": "Curve", "lut": ["a"] * 256}) is None

    def test_malformed_entries_skipped(self) -> None:
        chain = filters_from_list(
            [{"type": "Blur", "value": 0.2}, "Blur", {"type": "Unknown"}, None]
        )
        assert chain == (Blur(0.2),)

    def test_not_a_list(self) -> None:
        assert filters_from_list("Blur") == ()
        assert filters_from_list(None) == ()


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 0.5), (3, 3.0), (math.nan, 7.0), (math.inf, 7.0), ("1", 7.0), (True, 7.0)],
)
def test_finite_or(value: object, expected: float) -> None:
    assert finite_or(value, 7.0) == expected


def test_clamp() -> None:
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert clamp(0.5, 0, 1) == 0.5
