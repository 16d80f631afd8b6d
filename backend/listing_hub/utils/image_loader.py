"""
Folder image loader — reads product images from a local directory.
"""
import logging
import os
from typing import List

from listing_hub.core.constants.marketplace import DEFAULT_MIME_TYPE, IMAGE_MIME_TYPES
from listing_hub.core.exceptions import FolderNotFoundError, NoImagesFoundError
from listing_hub.schemas.products import ImageAsset

logger = logging.getLogger(__name__)


def get_mime_type(extension: str) -> str:
    """Map a file extension ('.png' or 'png') to its MIME type."""
    ext = extension.lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    return IMAGE_MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def is_valid_folder(folder_path: str) -> bool:
    return bool(folder_path) and os.path.isdir(folder_path)


def load_images_from_folder(folder_path: str) -> List[ImageAsset]:
    """Load every image file directly inside `folder_path`.

    Order follows directory enumeration. Subdirectories are skipped.

    Raises:
        FolderNotFoundError: path missing or not a directory.
        NoImagesFoundError: no .jpg/.jpeg/.png/.gif/.webp file in the folder.
    """
    if not is_valid_folder(folder_path):
        raise FolderNotFoundError(folder_path)

    images: List[ImageAsset] = []
    for name in os.listdir(folder_path):
        file_path = os.path.join(folder_path, name)
        if os.path.isdir(file_path):
            continue
        ext = os.path.splitext(name)[1].lower()
        if ext not in IMAGE_MIME_TYPES:
            continue
        with open(file_path, "rb") as fh:
            content = fh.read()
        images.append(ImageAsset(content=content, filename=name, mime_type=get_mime_type(ext)))
        logger.info(f"Loaded image: {name} ({len(content)} bytes)")

    if not images:
        raise NoImagesFoundError(folder_path)

    logger.info(f"Found {len(images)} images in {folder_path}")
    return images
