"""Apply filter chains to Pillow images with numpy.

The source image of each layer is kept unchanged; rendering always starts from
it and applies the layer's current chain, so filters never accumulate in the
pixels.
"""

import logging
import math
from typing import Callable, Mapping, Sequence

import numpy as np
from PIL import Image, ImageFilter

from designfx.config import EngineConfig
from designfx.core.curves import apply_lut
from designfx.core.filters import (
    Blur,
    Brightness,
    Contrast,
    Curve,
    FilterOp,
    Gamma,
    Grayscale,
    HueRotation,
    Noise,
    Pixelate,
    Saturation,
    Vibrance,
)
from designfx.renderer.svg_renderer import contrast_factor

logger = logging.getLogger(__name__)


def hue_rotation_matrix(rotation: float) -> np.ndarray:
    """RGB hue rotation matrix, where rotation 1 is a half turn."""
    angle = rotation * math.pi
    cos, sin = math.cos(angle), math.sin(angle)
    return np.array(
        [
            [
                0.213 + cos * 0.787 - sin * 0.213,
                0.715 - cos * 0.715 - sin * 0.715,
                0.072 - cos * 0.072 + sin * 0.928,
            ],
            [
                0.213 - cos * 0.213 + sin * 0.143,
                0.715 + cos * 0.285 + sin * 0.140,
                0.072 - cos * 0.072 - sin * 0.283,
            ],
            [
                0.213 - cos * 0.213 - sin * 0.787,
                0.715 - cos * 0.715 + sin * 0.715,
                0.072 + cos * 0.928 + sin * 0.072,
            ],
        ]
    )


def _to_uint8(rgb: np.ndarray) -> np.ndarray:
    return np.floor(np.clip(rgb, 0, 255) + 0.5).astype(np.uint8)


def apply_chain(
    image: Image.Image,
    ops: Sequence[FilterOp],
    config: EngineConfig | None = None,
) -> Image.Image:
    """Return a new RGBA image with the ops applied in order.

    Args:
        image: Source image. It is converted to RGBA and left unmodified.
        ops: Filter chain.
        config: Engine configuration, for blur scale and noise seed.
    """
    config = config if config is not None else EngineConfig.default()
    pixels = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    alpha = pixels[..., 3:].copy()
    rgb = pixels[..., :3].astype(np.float64)
    rng = np.random.default_rng(config.noise_seed)

    for op in ops:
        if isinstance(op, Brightness):
            rgb = rgb + op.value * 255.0
        elif isinstance(op, Contrast):
            factor = contrast_factor(op.value)
            rgb = factor * (rgb - 128.0) + 128.0
        elif isinstance(op, Gamma):
            rgb = 255.0 * np.power(np.clip(rgb, 0, 255) / 255.0, 1.0 / op.value)
        elif isinstance(op, HueRotation):
            rgb = rgb @ hue_rotation_matrix(op.value).T
        elif isinstance(op, Saturation):
            largest = rgb.max(axis=2, keepdims=True)
            rgb = rgb + (largest - rgb) * -op.value
        elif isinstance(op, Vibrance):
            largest = rgb.max(axis=2, keepdims=True)
            average = rgb.mean(axis=2, keepdims=True)
            amount = (np.abs(largest - average) * 2.0 / 255.0) * -op.value
            rgb = rgb + (largest - rgb) * amount
        elif isinstance(op, Grayscale):
            rgb = np.repeat(rgb.mean(axis=2, keepdims=True), 3, axis=2)
        elif isinstance(op, Curve):
            rgb = apply_lut(_to_uint8(rgb), op.lut, op.channel, op.intensity).astype(
                np.float64
            )
        elif isinstance(op, Noise):
            if op.value > 0:
                rgb = rgb + (0.5 - rng.random(rgb.shape[:2] + (1,))) * op.value
        elif isinstance(op, (Blur, Pixelate)):
            rgb = _apply_spatial(_to_uint8(rgb), op, config).astype(np.float64)
        else:
            logger.warning(f"Unsupported filter {op.type}, skipping")
        rgb = np.clip(rgb, 0, 255)

    return Image.fromarray(np.concatenate([_to_uint8(rgb), alpha], axis=2))


def _apply_spatial(rgb: np.ndarray, op: FilterOp, config: EngineConfig) -> np.ndarray:
    image = Image.fromarray(rgb)
    if isinstance(op, Blur):
        radius = op.value * config.blur_scale * max(image.size)
        if radius > 0:
            image = image.filter(ImageFilter.GaussianBlur(radius))
    elif isinstance(op, Pixelate):
        block = int(op.value)
        if block > 1:
            width, height = image.size
            small = image.resize(
                (max(1, math.ceil(width / block)), max(1, math.ceil(height / block))),
                Image.Resampling.NEAREST,
            )
            image = small.resize((width, height), Image.Resampling.NEAREST)
    return np.asarray(image, dtype=np.uint8)


class PixelRenderer:
    """Rendering collaborator applying chains to Pillow images.

    Args:
        images: Source image per raster layer id.
        config: Engine configuration.
        on_repaint: Called after each repaint request.
    """

    def __init__(
        self,
        images: Mapping[str, Image.Image] | None = None,
        config: EngineConfig | None = None,
        on_repaint: Callable[[], None] | None = None,
    ) -> None:
        self.images: dict[str, Image.Image] = dict(images or {})
        self.chains: dict[str, tuple[FilterOp, ...]] = {}
        self.config = config if config is not None else EngineConfig.default()
        self.on_repaint = on_repaint
        self.repaints = 0

    def set_image(self, layer_id: str, image: Image.Image) -> None:
        self.images[layer_id] = image

    def apply_filter_chain(self, layer_id: str, ops: Sequence[FilterOp]) -> None:
        self.chains[layer_id] = tuple(ops)

    def request_repaint(self) -> None:
        self.repaints += 1
        if self.on_repaint is not None:
            self.on_repaint()

    def render(self, layer_id: str) -> Image.Image | None:
        """Render a layer with its current chain, or None without an image."""
        image = self.images.get(layer_id)
        if image is None:
            logger.debug(f"No image for layer '{layer_id}'")
            return None
        return apply_chain(image, self.chains.get(layer_id, ()), self.config)
