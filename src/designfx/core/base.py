from typing import Protocol, Sequence

from designfx.core.filters import FilterOp


class Renderer(Protocol):
    """Rendering collaborator protocol.

    The compositing engine hands each raster layer's effective filter chain to
    the renderer and asks for one repaint per pass. Pixel buffers stay on the
    renderer's side.
    """

    def apply_filter_chain(self, layer_id: str, ops: Sequence[FilterOp]) -> None: ...
    def request_repaint(self) -> None: ...
