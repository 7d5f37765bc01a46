"""Document persistence boundary.

Adjustment layers are stored with their kind, settings, opacity, visibility
and position. Raster layers are stored with their base filter chain only: the
composited chain is always derivable and is recomputed after loading.

Example document::

    {
        "version": 1,
        "layers": [
            {"type": "raster", "id": "photo", "name": "Photo",
             "base_filters": [{"type": "Brightness", "value": 0.1}]},
            {"type": "adjustment", "id": "levels-1", "name": "Levels 1",
             "kind": "levels", "settings": {"black": 0.1, "mid": 1, "white": 1},
             "opacity": 1.0, "visible": true}
        ]
    }
"""

import json
import logging
from typing import IO, Any, Mapping, Union

from designfx.config import FALSE_VALUES, TRUE_VALUES
from designfx.core.constants import AdjustmentKind
from designfx.core.filters import finite_or, filters_from_list, filters_to_list
from designfx.core.layer import AdjustmentLayer, Layer, RasterLayer
from designfx.core.stack import LayerStack

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def bool_or(value: Any, default: bool) -> bool:
    """Return value as a boolean, or default when it is not one.

    Strings such as "false" or "on" are read like environment variables.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_VALUES:
            return True
        if word in FALSE_VALUES:
            return False
    if value is not None:
        logger.debug(f"Expected a boolean, got {value!r}, using {default}")
    return default


def dump_layer(layer: Layer, index: int) -> dict[str, Any] | None:
    """Serialize one layer, or None for layer types without a stored form."""
    data: dict[str, Any] = {
        "id": layer.id,
        "name": layer.name,
        "index": index,
        "visible": layer.visible,
        "opacity": layer.opacity,
    }
    if isinstance(layer, RasterLayer):
        data["type"] = "raster"
        base = layer.base_filters if layer.base_filters is not None else layer.filters
        data["base_filters"] = filters_to_list(base)
        return data
    if isinstance(layer, AdjustmentLayer):
        data["type"] = "adjustment"
        if isinstance(layer.kind, AdjustmentKind):
            data["kind"] = layer.kind.value
            data["settings"] = layer.settings.to_dict()
        else:
            data["kind"] = layer.kind
            data["settings"] = layer.settings
        return data
    logger.warning(f"Layer '{layer.id}' of type {type(layer).__name__} is not stored")
    return None


def dump_stack(stack: LayerStack) -> dict[str, Any]:
    """Serialize a layer stack to a JSON-compatible dict, bottom layer first."""
    layers = []
    for index, layer in enumerate(stack):
        data = dump_layer(layer, index)
        if data is not None:
            layers.append(data)
    return {"version": FORMAT_VERSION, "layers": layers}


def load_layer(data: Mapping[str, Any]) -> Layer | None:
    """Create a layer from its stored form, or None when it is not recognized."""
    layer_type = data.get("type")
    layer_id = data.get("id")
    if not isinstance(layer_id, str) or not layer_id:
        logger.warning(f"Layer without a valid id, skipping: {dict(data)!r}")
        return None
    common = {
        "id": layer_id,
        "name": str(data.get("name") or ""),
        "visible": bool_or(data.get("visible"), True),
        "opacity": finite_or(data.get("opacity"), 1.0),
    }
    if layer_type == "raster":
        base = filters_from_list(data.get("base_filters", []))
        return RasterLayer(filters=base, base_filters=base, **common)
    if layer_type == "adjustment":
        kind = data.get("kind")
        if not isinstance(kind, str):
            logger.warning(f"Adjustment layer '{layer_id}' has no kind")
            kind = repr(kind)
        return AdjustmentLayer(kind=kind, settings=data.get("settings"), **common)
    logger.warning(f"Unknown layer type {layer_type!r} of '{layer_id}', skipping")
    return None


def load_stack(data: Mapping[str, Any]) -> LayerStack:
    """Create a layer stack from a stored document.

    Layers are ordered by their ``index`` when present, else by list order.
    Unknown or duplicate layers are skipped.
    """
    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        logger.warning(f"Unsupported document version {version!r}, reading anyway")

    items = data.get("layers", [])
    if not isinstance(items, list):
        raise ValueError("Document 'layers' must be a list")

    def order(entry: tuple[int, Any]) -> float:
        position, item = entry
        index = item.get("index") if isinstance(item, Mapping) else None
        return finite_or(index, float(position))

    stack = LayerStack()
    for _, item in sorted(enumerate(items), key=order):
        if not isinstance(item, Mapping):
            logger.warning(f"Malformed layer entry {item!r}, skipping")
            continue
        layer = load_layer(item)
        if layer is None:
            continue
        if layer.id in stack:
            logger.warning(f"Duplicate layer id '{layer.id}', skipping")
            continue
        stack.insert(layer)
    return stack


def save(stack: LayerStack, output: Union[str, IO[str]], indent: int = 2) -> None:
    """Write a layer stack as JSON to a path or a text file object."""
    data = dump_stack(stack)
    if isinstance(output, str):
        with open(output, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent)
    else:
        json.dump(data, output, indent=indent)


def load(input: Union[str, IO[str]]) -> LayerStack:
    """Read a layer stack from a JSON path or text file object."""
    if isinstance(input, str):
        with open(input, encoding="utf-8") as f:
            data = json.load(f)
    else:
        data = json.load(input)
    if not isinstance(data, Mapping):
        raise ValueError("Document must be a JSON object")
    return load_stack(data)
