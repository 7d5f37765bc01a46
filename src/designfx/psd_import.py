"""Build a layer stack from a Photoshop document.

Example usage:

    from designfx.psd_import import load_psd

    stack, images = load_psd("input.psd", load_images=True)

Groups are flattened: their descendants are placed bottom-to-top in one stack.
Supported adjustment layers become adjustment layers with their settings
translated to the unit ranges of the engine. Other adjustments are skipped.
Every other layer becomes a raster layer.
"""

import logging
from typing import Any, Callable, Union

from PIL import Image
from psd_tools import PSDImage
from psd_tools.api import adjustments, layers

from designfx.core.constants import AdjustmentKind, CurvesChannel
from designfx.core.filters import clamp
from designfx.core.layer import AdjustmentLayer, RasterLayer
from designfx.core.stack import LayerStack

logger = logging.getLogger(__name__)

# Exposure stops mapped to full brightness.
EXPOSURE_STOPS = 4.0

CURVES_CHANNEL_IDS = {
    0: CurvesChannel.RGB,
    1: CurvesChannel.RED,
    2: CurvesChannel.GREEN,
    3: CurvesChannel.BLUE,
}


def load_psd(
    psd_or_path: Union[str, PSDImage], load_images: bool = False
) -> tuple[LayerStack, dict[str, Image.Image]]:
    """Create a layer stack from a PSD file or PSDImage.

    Args:
        psd_or_path: Path to the PSD file, or an opened PSDImage.
        load_images: Also return the composited image of each raster layer.

    Returns:
        The stack and the images keyed by raster layer id.
    """
    if isinstance(psd_or_path, PSDImage):
        psd = psd_or_path
    else:
        psd = PSDImage.open(psd_or_path)
    stack = LayerStack()
    images: dict[str, Image.Image] = {}
    for layer in psd.descendants():
        if isinstance(layer, layers.Group):
            continue
        layer_id = f"layer-{layer.layer_id}"
        if layer_id in stack:
            logger.warning(
                f"Duplicate layer id {layer.layer_id}, skipping '{layer.name}'"
            )
            continue
        common = {
            "id": layer_id,
            "name": layer.name,
            "visible": bool(layer.visible),
            "opacity": layer.opacity / 255.0,
        }

        if isinstance(layer, layers.AdjustmentLayer):
            converted = create_adjustment(layer, common)
            if converted is not None:
                stack.insert(converted)
            continue

        stack.insert(RasterLayer(**common))
        if load_images:
            image = layer.topil()
            if image is None:
                logger.info(f"Layer '{layer.name}' has no pixels")
            else:
                images[layer_id] = image
    logger.debug(f"Loaded {len(stack)} layer(s) from PSD")
    return stack, images


def create_adjustment(
    layer: layers.AdjustmentLayer, common: dict[str, Any]
) -> AdjustmentLayer | None:
    """Translate a psd-tools adjustment layer, or None if it is not supported."""
    for layer_type, (kind, read_fn) in READERS.items():
        if isinstance(layer, layer_type):
            return AdjustmentLayer(kind=kind, settings=read_fn(layer), **common)
    logger.warning(
        f"{layer.__class__.__name__} adjustment layer is not supported: '{layer.name}'"
    )
    return None


def read_curves(layer: adjustments.Curves) -> dict[str, Any]:
    """Read per-channel curves.

    Photoshop stores points as (output, input) on 0-255; they are swapped and
    normalized to (x, y) on 0-1.
    """
    points_by_channel: dict[str, list[list[float]]] = {}
    for item in getattr(layer.data, "extra", None) or []:
        channel = CURVES_CHANNEL_IDS.get(item.channel_id)
        if channel is None:
            logger.warning(
                f"Curves adjustment '{layer.name}': "
                f"Unknown channel ID {item.channel_id}, skipping"
            )
            continue
        points_by_channel[channel.value] = [
            [x / 255.0, y / 255.0] for y, x in item.points
        ]
    if not points_by_channel:
        logger.info(f"Curves adjustment '{layer.name}' has no curve data")
    return {"channel": CurvesChannel.RGB.value, "points_by_channel": points_by_channel}


def read_levels(layer: adjustments.Levels) -> dict[str, Any]:
    """Read the composite levels record; per-channel records are ignored."""
    record = layer.data[0]
    return {
        "black": record.input_floor / 255.0,
        "mid": record.gamma / 100.0,
        "white": record.input_ceiling / 255.0,
    }


def read_hue_saturation(layer: adjustments.HueSaturation) -> dict[str, Any]:
    hue, saturation, lightness = layer.master
    return {
        "hue": clamp(hue / 180.0, -1.0, 1.0),
        "saturation": clamp(saturation / 100.0, -1.0, 1.0),
        "lightness": clamp(lightness / 100.0, -1.0, 1.0),
    }


def read_exposure(layer: adjustments.Exposure) -> dict[str, Any]:
    if layer.exposure_offset or layer.gamma != 1.0:
        logger.debug(
            f"Exposure adjustment '{layer.name}': offset and gamma are not imported"
        )
    return {"exposure": clamp(layer.exposure / EXPOSURE_STOPS, -1.0, 1.0)}


def read_vibrance(layer: adjustments.Vibrance) -> dict[str, Any]:
    return {
        "saturation": clamp(layer.saturation / 100.0, -1.0, 1.0),
        "vibrance": clamp(layer.vibrance / 100.0, -1.0, 1.0),
    }


def read_black_white(layer: adjustments.BlackAndWhite) -> dict[str, Any]:
    return {}


READERS: dict[type, tuple[AdjustmentKind, Callable[[Any], dict[str, Any]]]] = {
    adjustments.Curves: (AdjustmentKind.CURVES, read_curves),
    adjustments.Levels: (AdjustmentKind.LEVELS, read_levels),
    adjustments.HueSaturation: (AdjustmentKind.HUE_SATURATION, read_hue_saturation),
    adjustments.Exposure: (AdjustmentKind.EXPOSURE, read_exposure),
    adjustments.Vibrance: (AdjustmentKind.SATURATION_VIBRANCE, read_vibrance),
    adjustments.BlackAndWhite: (AdjustmentKind.BLACK_WHITE, read_black_white),
}