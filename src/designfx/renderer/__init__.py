from designfx.renderer.pixel_renderer import PixelRenderer, apply_chain
from designfx.renderer.svg_renderer import SVGFilterRenderer

__all__ = ["PixelRenderer", "SVGFilterRenderer", "apply_chain"]
