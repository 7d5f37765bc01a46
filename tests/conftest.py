import logging
from typing import Callable, Iterator
from unittest.mock import Mock

import numpy as np
import pytest
from PIL import Image

from designfx.config import EngineConfig
from designfx.core.engine import CompositingEngine
from designfx.core.filters import Brightness
from designfx.core.layer import RasterLayer
from designfx.core.stack import LayerStack

logger = logging.getLogger(__name__)


@pytest.fixture
def config() -> EngineConfig:
    """Configuration compositing synchronously on mount."""
    return EngineConfig(defer_initial_recompute=False)


@pytest.fixture
def renderer() -> Mock:
    """Rendering collaborator recording the calls of the engine."""
    return Mock(spec=["apply_filter_chain", "request_repaint"])


@pytest.fixture
def photo() -> RasterLayer:
    return RasterLayer(id="photo", name="Photo", filters=(Brightness(0.1),))


@pytest.fixture
def stack(photo: RasterLayer) -> LayerStack:
    return LayerStack([photo])


@pytest.fixture
def engine(
    stack: LayerStack, renderer: Mock, config: EngineConfig
) -> Iterator[CompositingEngine]:
    engine = CompositingEngine(stack, renderer, config=config)
    engine.mount()
    yield engine
    engine.close()


@pytest.fixture
def make_image() -> Callable[..., Image.Image]:
    """Factory of small RGBA test images."""

    def _make_image(
        color: tuple[int, int, int, int] = (200, 100, 50, 255),
        size: tuple[int, int] = (4, 3),
    ) -> Image.Image:
        pixels = np.empty((size[1], size[0], 4), dtype=np.uint8)
        pixels[...] = color
        return Image.fromarray(pixels)

    return _make_image
