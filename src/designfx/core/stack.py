"""Layer stack model.

The stack is ordered bottom-to-top and its order is the only source of
compositing precedence: a raster layer is recolored by exactly the visible
adjustment layers at higher indices. Every mutation goes through a named
method and emits a single change notification.
"""

import dataclasses
import logging
from enum import Enum
from typing import Any, Callable, Iterable, Iterator

from designfx.core.constants import AdjustmentKind, get_adjustment_label, parse_kind
from designfx.core.counter import AutoCounter, next_indexed_name
from designfx.core.filters import FilterOp
from designfx.core.layer import AdjustmentLayer, Layer, RasterLayer

logger = logging.getLogger(__name__)


class LayerNotFoundError(KeyError):
    """No layer with the given id is in the stack."""


class StackAction(str, Enum):
    INSERT = "insert"
    REMOVE = "remove"
    MOVE = "move"
    VISIBILITY = "visibility"
    OPACITY = "opacity"
    SETTINGS = "settings"
    BASE_FILTERS = "base-filters"


@dataclasses.dataclass(frozen=True)
class StackChange:
    """Notification emitted after each stack mutation."""

    action: StackAction
    layer_id: str


StackListener = Callable[["LayerStack", StackChange], None]


class LayerStack:
    """Ordered, mutable sequence of layers, bottom-to-top.

    Example usage:

        stack = LayerStack()
        stack.insert(RasterLayer(id="photo"))
        levels = stack.add_adjustment("levels")
        stack.set_adjustment_settings(levels.id, {"black": 0.1})
    """

    def __init__(self, layers: Iterable[Layer] = ()) -> None:
        self._layers: list[Layer] = []
        self._listeners: list[StackListener] = []
        self._counter = AutoCounter()
        for layer in layers:
            self._check_new(layer)
            self._layers.append(layer)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __getitem__(self, index: int) -> Layer:
        return self._layers[index]

    def __contains__(self, layer_id: object) -> bool:
        return any(layer.id == layer_id for layer in self._layers)

    def __repr__(self) -> str:
        names = ", ".join(repr(layer.name or layer.id) for layer in self._layers)
        return f"LayerStack([{names}])"

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._layers)

    def get(self, layer_id: str) -> Layer:
        """Get a layer by id."""
        return self._layers[self.index_of(layer_id)]

    def index_of(self, layer_id: str) -> int:
        """Stack index of a layer, 0 being the bottom."""
        for index, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return index
        raise LayerNotFoundError(layer_id)

    def raster_layers(self) -> list[tuple[int, RasterLayer]]:
        """Raster layers with their indices, bottom first."""
        return [
            (index, layer)
            for index, layer in enumerate(self._layers)
            if isinstance(layer, RasterLayer)
        ]

    def adjustment_layers(
        self, visible_only: bool = False
    ) -> list[tuple[int, AdjustmentLayer]]:
        """Adjustment layers with their indices, bottom first."""
        return [
            (index, layer)
            for index, layer in enumerate(self._layers)
            if isinstance(layer, AdjustmentLayer) and (layer.visible or not visible_only)
        ]

    def adjustments_above(self, index: int) -> list[AdjustmentLayer]:
        """Visible adjustment layers strictly above the given index, bottom first."""
        return [
            layer
            for position, layer in self.adjustment_layers(visible_only=True)
            if position > index
        ]

    def subscribe(self, listener: StackListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def new_layer_id(self, prefix: str = "layer") -> str:
        """Generate a layer id not used in the stack."""
        return self._counter.get_id(prefix, taken=(layer.id for layer in self._layers))

    def insert(self, layer: Layer, index: int | None = None) -> "LayerStack":
        """Insert a layer at the index, or on top when index is None.

        The index is clamped into [0, len]. A raster layer without a base chain
        gets its current chain captured as base.
        """
        self._check_new(layer)
        position = len(self._layers) if index is None else self._clamp(index)
        if isinstance(layer, RasterLayer):
            layer.capture_base()
        self._layers.insert(position, layer)
        logger.debug(f"Inserted layer '{layer.id}' at {position}")
        self._emit(StackAction.INSERT, layer.id)
        return self

    def add_adjustment(
        self,
        kind: AdjustmentKind | str,
        index: int | None = None,
        settings: Any = None,
        name: str | None = None,
    ) -> AdjustmentLayer:
        """Create an adjustment layer with default settings and insert it.

        The layer is named after its kind and numbered after the existing
        layers of the same label, e.g. "Levels 2". Returns the new layer.
        """
        kind = parse_kind(kind)
        if name is None:
            name = next_indexed_name(
                get_adjustment_label(kind), (layer.name for layer in self._layers)
            )
        prefix = kind.value if isinstance(kind, AdjustmentKind) else "adjustment"
        layer = AdjustmentLayer(
            id=self.new_layer_id(prefix), name=name, kind=kind, settings=settings
        )
        self.insert(layer, index)
        return layer

    def remove(self, layer_id: str) -> "LayerStack":
        layer = self._layers.pop(self.index_of(layer_id))
        logger.debug(f"Removed layer '{layer.id}'")
        self._emit(StackAction.REMOVE, layer_id)
        return self

    def move(self, layer_id: str, new_index: int) -> "LayerStack":
        """Move a layer to a new index, clamped into [0, len - 1]."""
        layer = self._layers.pop(self.index_of(layer_id))
        position = self._clamp(new_index)
        self._layers.insert(position, layer)
        logger.debug(f"Moved layer '{layer_id}' to {position}")
        self._emit(StackAction.MOVE, layer_id)
        return self

    def set_visible(self, layer_id: str, visible: bool) -> "LayerStack":
        self.get(layer_id).visible = bool(visible)
        self._emit(StackAction.VISIBILITY, layer_id)
        return self

    def set_opacity(self, layer_id: str, opacity: float) -> "LayerStack":
        """Set layer opacity, which is the intensity of adjustment layers."""
        self.get(layer_id).opacity = opacity
        self._emit(StackAction.OPACITY, layer_id)
        return self

    def set_adjustment_settings(self, layer_id: str, settings: Any) -> "LayerStack":
        """Replace the settings of an adjustment layer.

        Missing or malformed fields take the kind's defaults.
        """
        layer = self.get(layer_id)
        if not isinstance(layer, AdjustmentLayer):
            raise TypeError(f"Layer '{layer_id}' is not an adjustment layer")
        layer.update_settings(settings)
        self._emit(StackAction.SETTINGS, layer_id)
        return self

    def set_base_filters(
        self, layer_id: str, filters: Iterable[FilterOp]
    ) -> "LayerStack":
        """Replace the intrinsic filters of a raster layer.

        This is the only way a base chain changes after it has been captured.
        """
        layer = self.get(layer_id)
        if not isinstance(layer, RasterLayer):
            raise TypeError(f"Layer '{layer_id}' is not a raster layer")
        layer.base_filters = tuple(filters)
        self._emit(StackAction.BASE_FILTERS, layer_id)
        return self

    def _check_new(self, layer: Layer) -> None:
        if not isinstance(layer, Layer):
            raise TypeError(f"Expected a Layer, got {type(layer).__name__}")
        if layer.id in self:
            raise ValueError(f"Duplicate layer id: '{layer.id}'")

    def _clamp(self, index: int) -> int:
        return max(0, min(len(self._layers), index))

    def _emit(self, action: StackAction, layer_id: str) -> None:
        change = StackChange(action, layer_id)
        for listener in list(self._listeners):
            try:
                listener(self, change)
            except Exception:
                logger.exception(f"Stack listener failed on {action.value}")
