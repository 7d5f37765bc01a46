import argparse
import json
import logging
import os
import sys

from designfx import document
from designfx.config import EngineConfig
from designfx.core.base import Renderer
from designfx.core.engine import CompositingEngine
from designfx.core.filters import filters_to_list
from designfx.image_utils import save_image
from designfx.psd_import import load_psd
from designfx.renderer import PixelRenderer, SVGFilterRenderer

logger = logging.getLogger(__name__)

PSD_EXTENSIONS = (".psd", ".psb")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Composite adjustment layers of a layered document"
    )
    parser.add_argument(
        "input", metavar="INPUT", type=str, help="Input JSON document or PSD file"
    )
    parser.add_argument(
        "output",
        metavar="PATH",
        type=str,
        nargs="?",
        default="-",
        help="Output file, or directory for images. Default: stdout",
    )
    parser.add_argument(
        "--format",
        metavar="FORMAT",
        type=str,
        choices=["json", "svg", "png", "webp"],
        default="json",
        help="Output format (json, svg, png, webp). Default: json",
    )
    parser.add_argument(
        "--size",
        metavar="SIZE",
        type=int,
        nargs=2,
        default=None,
        help="Artboard width and height used to scale blur in SVG output.",
    )
    parser.add_argument(
        "--loglevel",
        metavar="LEVEL",
        default="WARNING",
        help="Logging level, default WARNING",
    )
    return parser.parse_args(argv)


def composite_report(engine: CompositingEngine) -> dict:
    """Effective filter chain of each raster layer."""
    return {
        "layers": [
            {"id": layer_id, "filters": filters_to_list(chain)}
            for layer_id, chain in engine.chains().items()
        ]
    }


def write_text(text: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(text + "\n")
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)


def main(argv: list[str] | None = None) -> None:
    """Main function to composite a document."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.loglevel.upper(), "WARNING"))
    config = EngineConfig.default()
    config.defer_initial_recompute = False

    images = {}
    if args.input.lower().endswith(PSD_EXTENSIONS):
        load_images = args.format in ("png", "webp")
        stack, images = load_psd(args.input, load_images=load_images)
    else:
        stack = document.load(args.input)

    svg_renderer: SVGFilterRenderer | None = None
    pixel_renderer: PixelRenderer | None = None
    renderer: Renderer
    if args.format == "svg":
        size = tuple(args.size) if args.size else (1000, 1000)
        renderer = svg_renderer = SVGFilterRenderer(size=size, config=config)
    else:
        renderer = pixel_renderer = PixelRenderer(images, config=config)
    engine = CompositingEngine(stack, renderer, config=config)
    engine.mount()

    if args.format == "json":
        write_text(json.dumps(composite_report(engine), indent=2), args.output)
    elif svg_renderer is not None:
        write_text(svg_renderer.tostring(), args.output)
    elif pixel_renderer is not None:
        if not images:
            raise SystemExit("Image output requires a PSD input with pixel layers")
        output_dir = "." if args.output == "-" else args.output
        os.makedirs(output_dir, exist_ok=True)
        for layer_id in images:
            image = pixel_renderer.render(layer_id)
            if image is None:
                continue
            filepath = os.path.join(output_dir, f"{layer_id}.{args.format}")
            save_image(image, filepath, args.format)
            logger.info(f"Saved {filepath}")
    engine.close()


if __name__ == "__main__":
    main()
