"""Tests for SVG utility functions."""

import xml.etree.ElementTree as ET

import pytest

from designfx import svg_utils


class TestNum2Str:
    """Test the num2str function for number formatting."""

    def test_boolean(self) -> None:
        assert svg_utils.num2str(True) == "true"
        assert svg_utils.num2str(False) == "false"

    def test_integer_like_float(self) -> None:
        assert svg_utils.num2str(1.0) == "1"
        assert svg_utils.num2str(-5.0) == "-5"

    def test_default_precision(self) -> None:
        """Test that filter values keep four digits."""
        assert svg_utils.num2str(1 / 255) == "0.0039"
        assert svg_utils.num2str(0.5) == "0.5"

    def test_zero_variations(self) -> None:
        assert svg_utils.num2str(-0.0) == "0"
        assert svg_utils.num2str(-0.00001) == "0"

    def test_invalid_type_raises_error(self) -> None:
        with pytest.raises(ValueError):
            svg_utils.num2str("1")  # type: ignore[arg-type]


def test_seq2str() -> None:
    assert svg_utils.seq2str([0, 0.5, 1.0]) == "0 0.5 1"
    assert svg_utils.seq2str((1, 2), sep=",") == "1,2"
    assert svg_utils.seq2str([]) == ""


class TestCreateNode:
    def test_attributes(self) -> None:
        node = svg_utils.create_node(
            "feFuncR", type="linear", slope=1.0, intercept=None, class_="curve"
        )
        assert node.attrib == {"class": "curve", "type": "linear", "slope": "1"}

    def test_hyphenated_names(self) -> None:
        node = svg_utils.create_node("filter", color_interpolation_filters="sRGB")
        assert node.get("color-interpolation-filters") == "sRGB"

    def test_parent(self) -> None:
        parent = ET.Element("filter")
        child = svg_utils.create_node("feColorMatrix", parent=parent, values=[1, 0])
        assert list(parent) == [child]
        assert child.get("values") == "1 0"


class TestReferences:
    def test_uri(self) -> None:
        node = svg_utils.create_node("filter", id="photo-filters")
        assert svg_utils.get_uri(node) == "#photo-filters"
        assert svg_utils.get_funciri(node) == "url(#photo-filters)"

    def test_missing_id(self) -> None:
        with pytest.raises(ValueError):
            svg_utils.get_uri(ET.Element("filter"))


def test_tostring() -> None:
    svg = svg_utils.create_node("svg")
    svg_utils.create_node("defs", parent=svg)
    assert svg_utils.tostring(svg) == "<svg>\n  <defs />\n</svg>"
