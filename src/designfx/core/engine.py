"""Non-destructive compositing of adjustment layers.

On every stack change the engine rebuilds, for each raster layer, the chain

    base filters ++ ops of every visible adjustment layer above it

in ascending stack order, hands the chain to the renderer and asks for one
repaint. The base chain is captured once and never replaced by a pass, so
recomputing any number of times gives the same result.
"""

import asyncio
import logging
from typing import Any, Callable

from designfx.config import EngineConfig
from designfx.core.base import Renderer
from designfx.core.filters import FilterOp
from designfx.core.layer import RasterLayer
from designfx.core.mappers import map_adjustment
from designfx.core.stack import LayerStack, StackChange

logger = logging.getLogger(__name__)

Scheduler = Callable[[Callable[[], None]], Any]


def next_tick(callback: Callable[[], None]) -> Any:
    """Run the callback on the next tick of the running event loop.

    Without a running loop the callback runs immediately.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop, running callback inline")
        callback()
        return None
    return loop.call_soon(callback)


class CompositingEngine:
    """Compositing engine bound to one layer stack.

    Example usage:

        stack = LayerStack([RasterLayer(id="photo")])
        engine = CompositingEngine(stack, renderer)
        engine.mount()
        stack.add_adjustment("black-white")  # recomposites synchronously

    Args:
        stack: Layer stack to composite. The engine subscribes to its changes.
        renderer: Rendering collaborator receiving the chains, or None.
        config: Engine configuration. Defaults to EngineConfig.default().
        schedule: Function deferring a callback to the next tick, used once by
            mount(). Defaults to the running asyncio loop.
    """

    def __init__(
        self,
        stack: LayerStack,
        renderer: Renderer | None = None,
        config: EngineConfig | None = None,
        schedule: Scheduler | None = None,
    ) -> None:
        self.stack = stack
        self.renderer = renderer
        self.config = config if config is not None else EngineConfig.default()
        self.passes = 0
        self._schedule = schedule if schedule is not None else next_tick
        self._mounted = False
        self._running = False
        self._pending = False
        self._unsubscribe: Callable[[], None] | None = stack.subscribe(
            self._on_change
        )

    def mount(self) -> None:
        """Schedule the initial recompute, once.

        Layer metadata may arrive after construction, so by default the first
        pass runs on the next tick rather than immediately.
        """
        if self._mounted:
            return
        self._mounted = True
        if self.config.defer_initial_recompute:
            self._schedule(self._initial_recompute)
        else:
            self.recompute()

    def close(self) -> None:
        """Stop listening to the stack."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def chains(self) -> dict[str, tuple[FilterOp, ...]]:
        """Current filter chain of every raster layer, keyed by layer id."""
        return {layer.id: layer.filters for _, layer in self.stack.raster_layers()}

    def contributions(self) -> list[tuple[int, list[FilterOp]]]:
        """Ops of each visible adjustment layer with its index, bottom first.

        A layer that fails to map is logged and contributes nothing.
        """
        result = []
        for index, layer in self.stack.adjustment_layers(visible_only=True):
            try:
                ops = map_adjustment(layer.kind, layer.settings, layer.intensity)
            except Exception:
                logger.exception(
                    f"Failed to map adjustment layer '{layer.id}' ({layer.kind}), "
                    "skipping"
                )
                continue
            if ops:
                result.append((index, ops))
        return result

    def recompute(self) -> dict[str, tuple[FilterOp, ...]]:
        """Recomposite every raster layer and request a repaint.

        A change made while a pass is running is picked up by one more pass
        after it instead of running re-entrantly.

        Returns:
            The new chains keyed by raster layer id.
        """
        if self._running:
            self._pending = True
            return self.chains()

        self._running = True
        try:
            self._pending = False
            chains = self._composite()
            if self._pending:
                self._pending = False
                chains = self._composite()
                if self._pending:
                    logger.warning(
                        "Layer stack changed during every compositing pass, giving up"
                    )
            return chains
        finally:
            self._running = False
            self._pending = False

    def _initial_recompute(self) -> None:
        if self._unsubscribe is None:
            logger.debug("Engine closed before the initial recompute")
            return
        self.recompute()

    def _on_change(self, stack: LayerStack, change: StackChange) -> None:
        logger.debug(f"Stack changed: {change.action.value} '{change.layer_id}'")
        self.recompute()

    def _composite(self) -> dict[str, tuple[FilterOp, ...]]:
        self.passes += 1
        contributions = self.contributions()
        chains = {}
        for index, layer in self.stack.raster_layers():
            layer.capture_base()
            chain = list(layer.base_filters or ())
            for position, ops in contributions:
                if position > index:
                    chain.extend(ops)
            layer.filters = tuple(chain)
            chains[layer.id] = layer.filters
            self._apply(layer)

        logger.debug(
            f"Composited {len(chains)} raster layer(s) with "
            f"{len(contributions)} active adjustment(s)"
        )
        if self.renderer is not None and self.config.repaint:
            try:
                self.renderer.request_repaint()
            except Exception:
                logger.exception("Repaint request failed")
        return chains

    def _apply(self, layer: RasterLayer) -> None:
        if self.renderer is None:
            return
        try:
            self.renderer.apply_filter_chain(layer.id, layer.filters)
        except Exception:
            logger.exception(f"Failed to apply filters to layer '{layer.id}'")
