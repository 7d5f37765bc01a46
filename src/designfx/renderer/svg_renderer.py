"""Render filter chains as SVG filter definitions.

Each raster layer gets one ``<filter>`` element whose primitives apply the
layer's chain in order. Layers reference it with ``filter="url(#id)"``.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Callable, Sequence

from designfx import svg_utils
from designfx.config import EngineConfig
from designfx.core.constants import CHANNEL_INDEX, MASTER_CHANNELS
from designfx.core.curves import blend_lut
from designfx.core.filters import (
    Blur,
    Brightness,
    Contrast,
    Curve,
    FilterOp,
    Gamma,
    Grayscale,
    HueRotation,
    Saturation,
    Vibrance,
)

logger = logging.getLogger(__name__)

FUNC_TAGS = ("feFuncR", "feFuncG", "feFuncB")


def contrast_factor(value: float) -> float:
    """Slope of a contrast op, with value in [-1, 1]."""
    contrast = value * 255.0
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


class SVGFilterRenderer:
    """Rendering collaborator producing SVG filter elements.

    Args:
        size: Reference (width, height) of the artboard, used to scale blur.
        config: Engine configuration, for the blur scale.
    """

    def __init__(
        self,
        size: tuple[int, int] = (1000, 1000),
        config: EngineConfig | None = None,
    ) -> None:
        self.size = size
        self.config = config if config is not None else EngineConfig.default()
        self.filters: dict[str, ET.Element] = {}
        self.repaints = 0

    def apply_filter_chain(self, layer_id: str, ops: Sequence[FilterOp]) -> None:
        self.filters[layer_id] = self.create_filter(layer_id, ops)

    def request_repaint(self) -> None:
        self.repaints += 1

    def filter_id(self, layer_id: str) -> str:
        return f"{layer_id}-filters"

    def create_filter(self, layer_id: str, ops: Sequence[FilterOp]) -> ET.Element:
        """Create a <filter> element applying the ops in order."""
        filter = svg_utils.create_node(
            "filter",
            id=self.filter_id(layer_id),
            color_interpolation_filters="sRGB",
        )
        registry: dict[type, Callable[[ET.Element, FilterOp], None]] = {
            Brightness: self._add_brightness,  # type: ignore[dict-item]
            Contrast: self._add_contrast,  # type: ignore[dict-item]
            Gamma: self._add_gamma,  # type: ignore[dict-item]
            HueRotation: self._add_hue_rotation,  # type: ignore[dict-item]
            Saturation: self._add_saturation,  # type: ignore[dict-item]
            Vibrance: self._add_vibrance,  # type: ignore[dict-item]
            Grayscale: self._add_grayscale,
            Curve: self._add_curve,  # type: ignore[dict-item]
            Blur: self._add_blur,  # type: ignore[dict-item]
        }
        for op in ops:
            add_fn = registry.get(type(op))
            if add_fn is None:
                logger.warning(
                    f"{op.type} filter is not supported in SVG, skipping "
                    f"on layer '{layer_id}'"
                )
                continue
            add_fn(filter, op)
        return filter

    def get_uri(self, layer_id: str) -> str:
        """Value of the filter attribute referencing the layer's filter."""
        return svg_utils.get_funciri(self.filters[layer_id])

    def to_svg(self) -> ET.Element:
        """Build an <svg> element holding all filters in <defs>."""
        width, height = self.size
        svg = svg_utils.create_node(
            "svg",
            xmlns=svg_utils.NAMESPACE,
            width=width,
            height=height,
            viewBox=svg_utils.seq2str([0, 0, width, height]),
        )
        defs = svg_utils.create_node("defs", parent=svg)
        for filter in self.filters.values():
            defs.append(filter)
        return svg

    def tostring(self) -> str:
        return svg_utils.tostring(self.to_svg())

    def _add_linear(self, filter: ET.Element, slope: float, intercept: float) -> None:
        fe_component = svg_utils.create_node("feComponentTransfer", parent=filter)
        for tag in FUNC_TAGS:
            svg_utils.create_node(
                tag,
                parent=fe_component,
                type="linear",
                slope=float(slope),
                intercept=float(intercept),
            )

    def _add_brightness(self, filter: ET.Element, op: Brightness) -> None:
        self._add_linear(filter, 1.0, op.value)

    def _add_contrast(self, filter: ET.Element, op: Contrast) -> None:
        factor = contrast_factor(op.value)
        self._add_linear(filter, factor, 0.5 * (1.0 - factor))

    def _add_gamma(self, filter: ET.Element, op: Gamma) -> None:
        fe_component = svg_utils.create_node("feComponentTransfer", parent=filter)
        for tag in FUNC_TAGS:
            svg_utils.create_node(
                tag,
                parent=fe_component,
                type="gamma",
                amplitude=1,
                exponent=1.0 / op.value,
                offset=0,
            )

    def _add_hue_rotation(self, filter: ET.Element, op: HueRotation) -> None:
        svg_utils.create_node(
            "feColorMatrix", parent=filter, type="hueRotate", values=op.value * 180.0
        )

    def _add_saturation(self, filter: ET.Element, op: Saturation) -> None:
        svg_utils.create_node(
            "feColorMatrix", parent=filter, type="saturate", values=1.0 + op.value
        )

    def _add_vibrance(self, filter: ET.Element, op: Vibrance) -> None:
        # SVG has no vibrance, a half-strength saturation is the closest match.
        svg_utils.create_node(
            "feColorMatrix",
            parent=filter,
            type="saturate",
            values=1.0 + 0.5 * op.value,
        )

    def _add_grayscale(self, filter: ET.Element, op: FilterOp) -> None:
        svg_utils.create_node("feColorMatrix", parent=filter, type="saturate", values=0)

    def _add_curve(self, filter: ET.Element, op: Curve) -> None:
        table = svg_utils.seq2str((blend_lut(op.lut, op.intensity) / 255.0).tolist())
        if op.channel in MASTER_CHANNELS:
            tags: Sequence[str] = FUNC_TAGS
        else:
            tags = (FUNC_TAGS[CHANNEL_INDEX[op.channel]],)
        fe_component = svg_utils.create_node("feComponentTransfer", parent=filter)
        for tag in tags:
            svg_utils.create_node(
                tag, parent=fe_component, type="table", tableValues=table
            )

    def _add_blur(self, filter: ET.Element, op: Blur) -> None:
        if op.value <= 0:
            return
        radius = op.value * self.config.blur_scale * max(self.size)
        svg_utils.create_node("feGaussianBlur", parent=filter, stdDeviation=radius)

