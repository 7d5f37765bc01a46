import logging

from PIL import Image

logger = logging.getLogger(__name__)


def _flatten_alpha(image: Image.Image) -> Image.Image:
    rgb_image = Image.new("RGB", image.size, (255, 255, 255))
    rgb_image.paste(image, mask=image.split()[3])
    return rgb_image


def save_image(image: Image.Image, filepath: str, image_format: str) -> None:
    """Save a PIL Image to file.

    JPEG has no alpha channel, so RGBA images are flattened on white.
    """
    if image_format.upper() == "JPEG" and image.mode == "RGBA":
        image = _flatten_alpha(image)
    logger.debug(f"Saving {image.size} image to {filepath}")
    image.save(filepath, format=image_format.upper())
