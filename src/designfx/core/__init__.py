from designfx.core.constants import AdjustmentKind, CurvesChannel
from designfx.core.curves import CurvePoint, apply_lut, build_lut
from designfx.core.engine import CompositingEngine
from designfx.core.layer import AdjustmentLayer, Layer, RasterLayer
from designfx.core.mappers import map_adjustment
from designfx.core.stack import LayerNotFoundError, LayerStack, StackChange

__all__ = [
    "AdjustmentKind",
    "AdjustmentLayer",
    "CompositingEngine",
    "CurvePoint",
    "CurvesChannel",
    "Layer",
    "LayerNotFoundError",
    "LayerStack",
    "RasterLayer",
    "StackChange",
    "apply_lut",
    "build_lut",
    "map_adjustment",
]
