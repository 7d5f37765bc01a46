import dataclasses
import logging
from typing import Any

from designfx.core.constants import AdjustmentKind, get_adjustment_label, parse_kind
from designfx.core.filters import FilterOp, clamp, finite_or
from designfx.core.settings import AdjustmentSettings, coerce_settings

logger = logging.getLogger(__name__)


@dataclasses.dataclass(eq=False)
class Layer:
    """A node of the layer stack.

    Layers are owned by a LayerStack; change them through the stack's methods
    so that the compositing engine is notified.
    """

    id: str
    name: str = ""
    visible: bool = True
    opacity: float = 1.0


@dataclasses.dataclass(eq=False)
class RasterLayer(Layer):
    """A layer with pixels, drawn by the rendering collaborator.

    ``filters`` is the chain currently applied. ``base_filters`` is the chain
    without any adjustment contribution; it is captured once and then left
    alone by recomposition.
    """

    filters: tuple[FilterOp, ...] = ()
    base_filters: tuple[FilterOp, ...] | None = None

    def __post_init__(self) -> None:
        self.filters = tuple(self.filters)
        if self.base_filters is not None:
            self.base_filters = tuple(self.base_filters)

    def capture_base(self) -> bool:
        """Capture the current chain as the base chain, once.

        Returns True if the base chain was captured by this call.
        """
        if self.base_filters is not None:
            return False
        self.base_filters = tuple(self.filters)
        logger.debug(
            f"Captured base filters of '{self.name or self.id}': "
            f"{len(self.base_filters)} op(s)"
        )
        return True


@dataclasses.dataclass(eq=False)
class AdjustmentLayer(Layer):
    """A layer recoloring every raster layer beneath it.

    It has no pixels. Its strength is the layer opacity, read as intensity.
    """

    kind: AdjustmentKind | str = AdjustmentKind.CURVES
    settings: Any = None

    def __post_init__(self) -> None:
        self.kind = parse_kind(self.kind)
        if not isinstance(self.kind, AdjustmentKind):
            logger.warning(
                f"Adjustment layer '{self.id}' has unknown kind {self.kind!r}"
            )
        else:
            self.settings = coerce_settings(self.kind, self.settings)
        if not self.name:
            self.name = get_adjustment_label(self.kind)

    @property
    def intensity(self) -> float:
        """Opacity clamped into [0, 1]; non-finite opacity reads as 1."""
        return clamp(finite_or(self.opacity, 1.0), 0.0, 1.0)

    def update_settings(self, settings: Any) -> AdjustmentSettings | None:
        if isinstance(self.kind, AdjustmentKind):
            self.settings = coerce_settings(self.kind, settings)
        else:
            self.settings = settings
        return self.settings

