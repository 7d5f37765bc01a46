from designfx.config import EngineConfig
from designfx.core import (
    AdjustmentKind,
    AdjustmentLayer,
    CompositingEngine,
    CurvePoint,
    CurvesChannel,
    Layer,
    LayerNotFoundError,
    LayerStack,
    RasterLayer,
    StackChange,
    apply_lut,
    build_lut,
    map_adjustment,
)
from designfx.document import dump_stack, load, load_stack, save
from designfx.version import __version__ as __version__

__all__ = [
    "AdjustmentKind",
    "AdjustmentLayer",
    "CompositingEngine",
    "CurvePoint",
    "CurvesChannel",
    "EngineConfig",
    "Layer",
    "LayerNotFoundError",
    "LayerStack",
    "RasterLayer",
    "StackChange",
    "apply_lut",
    "build_lut",
    "dump_stack",
    "load",
    "load_stack",
    "map_adjustment",
    "save",
]
