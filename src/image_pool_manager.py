"""
Image Pool Manager for the Pairs game

Handles loading and validation of the YAML file listing the card images
a deck can be dealt from.
"""

import yaml
from typing import List, Optional, Any
import logging

logger = logging.getLogger(__name__)


class ImagePoolValidationError(Exception):
    """Raised when YAML image pool validation fails."""
    pass


class ImagePoolManager:
    """Manages loading and validation of the card image pool from YAML files."""

    def __init__(self, yaml_file_path: Optional[str] = None):
        """
        Initialize ImagePoolManager with path to YAML file.

        Args:
            yaml_file_path: Path to the YAML file listing images. Defaults to the
                configured images file.
        """
        if yaml_file_path is None:
            from src.config.game_settings import get_game_settings
            yaml_file_path = get_game_settings().images_file
        self.yaml_file_path = yaml_file_path
        self.images: List[str] = []
        self._loaded = False

    def load_images_from_yaml(self) -> None:
        """
        Load the image pool from the YAML file.

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ImagePoolValidationError: If YAML structure is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        try:
            with open(self.yaml_file_path, 'r', encoding='utf-8') as file:
                data = yaml.safe_load(file)

            self.validate_yaml_structure(data)
            self.images = [image.strip() for image in data['images']]
            self._loaded = True
            logger.info(f"Successfully loaded {len(self.images)} images from {self.yaml_file_path}")

        except FileNotFoundError:
            logger.error(f"YAML file not found: {self.yaml_file_path}")
            raise
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            raise
        except ImagePoolValidationError as e:
            logger.error(f"Image pool validation error: {e}")
            raise

    def load_images(self, images: List[str]) -> None:
        """Load the pool from an in-memory list, with the same validation as YAML."""
        self.validate_yaml_structure({'images': images})
        self.images = [image.strip() for image in images]
        self._loaded = True

    def validate_yaml_structure(self, data: Any) -> None:
        """
        Validate the structure of loaded YAML data.

        Args:
            data: Parsed YAML data to validate

        Raises:
            ImagePoolValidationError: If structure is invalid
        """
        if not isinstance(data, dict):
            raise ImagePoolValidationError("YAML root must be a dictionary")

        if 'images' not in data:
            raise ImagePoolValidationError("YAML must contain 'images' key")

        images = data['images']
        if not isinstance(images, list):
            raise ImagePoolValidationError("'images' must be a list")

        if len(images) == 0:
            raise ImagePoolValidationError("'images' list cannot be empty")

        for i, image in enumerate(images):
            if not isinstance(image, str):
                raise ImagePoolValidationError(f"Image {i} must be a string")
            if not image.strip():
                raise ImagePoolValidationError(f"Image {i} cannot be empty")

        stripped = [image.strip() for image in images]
        if len(stripped) != len(set(stripped)):
            raise ImagePoolValidationError("Duplicate images found")

    def get_all_images(self) -> List[str]:
        """
        Get all loaded images.

        Raises:
            RuntimeError: If no images are loaded
        """
        if not self._loaded:
            raise RuntimeError("No images loaded. Call load_images_from_yaml() first.")

        return self.images.copy()

    def is_loaded(self) -> bool:
        """Check if the pool has been loaded."""
        return self._loaded

    def get_image_count(self) -> int:
        """Get the number of loaded images."""
        return len(self.images) if self._loaded else 0
