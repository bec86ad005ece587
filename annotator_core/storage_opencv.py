"""
Storage utilities for loading and saving images from the local file system using OpenCV.

Images handed to and returned from this module are RGB, OpenCV itself works in BGR.
"""

import os
from typing import List

import cv2
import numpy as np

from annotator_core.logging import log_info, log_error

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff")


def load_image(image_path: str) -> np.ndarray:
    """
    Load an image as numpy array.

    Args:
        image_path: Local file path

    Returns:
        Image as numpy array of shape (h, w, 3) in RGB order

    Raises:
        FileNotFoundError: If the file doesn't exist
        OSError: If the file cannot be decoded
    """
    if not os.path.exists(image_path):
        log_error(f"Image file not found: {image_path}")
        raise FileNotFoundError(f"Image file not found: {image_path}")

    image = cv2.imread(image_path, cv2.IMREAD_COLOR)
    if image is None:
        log_error(f"Could not read image: {image_path}")
        raise OSError(f"Could not read image: {image_path}")

    log_info(f"Loaded image from {image_path} with shape {image.shape}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def save_image(image: np.ndarray, save_path: str) -> str:
    """
    Save an RGB image. The format is taken from the file extension.

    Returns:
        The save_path that was used

    Raises:
        OSError: If the image could not be written
    """
    folder = os.path.dirname(save_path)
    if folder:
        os.makedirs(folder, exist_ok=True)

    to_write = cv2.cvtColor(image, cv2.COLOR_RGB2BGR) if image.ndim == 3 else image
    if not cv2.imwrite(save_path, to_write):
        log_error(f"Failed to save image: {save_path}")
        raise OSError(f"Failed to save image: {save_path}")

    log_info(f"Saved image to {save_path}")
    return save_path


def list_images(folder: str) -> List[str]:
    """Sorted paths of the images directly inside ``folder``."""
    if not os.path.isdir(folder):
        raise FileNotFoundError(f"Folder not found: {folder}")
    return sorted(
        os.path.join(folder, name)
        for name in os.listdir(folder)
        if name.lower().endswith(IMAGE_EXTENSIONS)
    )
