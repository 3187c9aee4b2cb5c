"""Image classifiers that decide whether a picture contains a cat."""

import os
import random
from typing import List, Optional, Tuple, Any

import cv2
import numpy as np
from PIL import Image

from ..models.detection import BoundingBox
from ..config.defaults import CLASSIFIER_SETTINGS
from .interfaces import ImageServiceInterface
from .error_handler import ImageServiceError
from ..logging_config import get_logger

logger = get_logger("image_service")


def load_image(image_path: str) -> np.ndarray:
    """Read an image file into an RGB numpy array."""
    try:
        with Image.open(image_path) as image:
            return np.asarray(image.convert("RGB"))
    except OSError as e:
        raise ImageServiceError(f"Failed to load image {image_path}: {e}") from e


class FakeImageService(ImageServiceInterface):
    """Stand-in classifier that answers at random.

    Useful when no camera model is available. Pass a seed for a repeatable
    sequence of answers.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        detected = self._random.random() < 0.5
        logger.debug(f"Fake classifier answered {detected}")
        return detected


class HaarCascadeImageService(ImageServiceInterface):
    """Cat classifier using an OpenCV Haar cascade.

    Frames are converted to grayscale, blurred and histogram-equalized before
    running the cascade. Each hit gets a confidence in percent from its size
    and how close it is to the frame centre; the image contains a cat when
    any hit reaches the requested threshold.
    """

    def __init__(self,
                 cascade_path: Optional[str] = None,
                 scale_factor: float = CLASSIFIER_SETTINGS["scale_factor"],
                 min_neighbors: int = CLASSIFIER_SETTINGS["min_neighbors"],
                 min_size: Tuple[int, int] = CLASSIFIER_SETTINGS["min_size"],
                 max_size: Tuple[int, int] = CLASSIFIER_SETTINGS["max_size"]):
        self.cascade_path = cascade_path or os.path.join(
            cv2.data.haarcascades, CLASSIFIER_SETTINGS["cascade_file"]
        )
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_detection_size = min_size
        self.max_detection_size = max_size
        self.blur_kernel_size = CLASSIFIER_SETTINGS["blur_kernel_size"]

        self.haar_cascade = self._load_cascade(self.cascade_path)
        logger.info(f"Loaded Haar Cascade model from {self.cascade_path}")

    @staticmethod
    def _load_cascade(cascade_path: str) -> "cv2.CascadeClassifier":
        if not os.path.exists(cascade_path):
            raise ImageServiceError(f"Cascade file not found: {cascade_path}")

        cascade = cv2.CascadeClassifier(cascade_path)
        if cascade.empty():
            raise ImageServiceError(f"Failed to load cascade from {cascade_path}")
        return cascade

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        detections = self.detect_cats(image)
        detected = any(bbox.confidence >= confidence_threshold for bbox in detections)

        logger.debug(f"{len(detections)} candidate(s), cat detected: {detected} "
                     f"(threshold {confidence_threshold})")
        return detected

    def detect_cats(self, image: Any) -> List[BoundingBox]:
        """Run the cascade and return every hit with its confidence."""
        if image is None:
            raise ImageServiceError("No image to classify")

        frame = np.asarray(image)
        if frame.size == 0 or frame.ndim not in (2, 3):
            raise ImageServiceError(f"Unsupported image shape {frame.shape}")

        processed = self._preprocess_frame(frame)

        try:
            raw_detections = self.haar_cascade.detectMultiScale(
                processed,
                scaleFactor=self.scale_factor,
                minNeighbors=self.min_neighbors,
                minSize=self.min_detection_size,
                maxSize=self.max_detection_size,
                flags=cv2.CASCADE_SCALE_IMAGE
            )
        except cv2.error as e:
            raise ImageServiceError(f"Haar Cascade detection failed: {e}") from e

        frame_h, frame_w = frame.shape[:2]
        return [
            self._to_bounding_box(int(x), int(y), int(w), int(h), frame_w, frame_h)
            for x, y, w, h in raw_detections
        ]

    def _preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        """Grayscale, blur and equalize a frame for the cascade."""
        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)

        if frame.ndim == 3:
            channels = frame.shape[2]
            if channels == 4:
                gray = cv2.cvtColor(frame, cv2.COLOR_RGBA2GRAY)
            elif channels == 3:
                gray = cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)
            else:
                gray = frame[:, :, 0]
        else:
            gray = frame

        blurred = cv2.GaussianBlur(gray, (self.blur_kernel_size, self.blur_kernel_size), 0)
        return cv2.equalizeHist(blurred)

    def _to_bounding_box(self, x: int, y: int, w: int, h: int,
                         frame_w: int, frame_h: int) -> BoundingBox:
        bbox = BoundingBox(x=x, y=y, width=w, height=h, confidence=0.0)

        # Larger hits near the centre of the frame score higher
        center_x, center_y = bbox.center()
        center_dist = ((center_x - frame_w // 2) ** 2 + (center_y - frame_h // 2) ** 2) ** 0.5
        max_dist = (frame_w ** 2 + frame_h ** 2) ** 0.5
        center_factor = 1.0 - (center_dist / max_dist) if max_dist else 0.0

        max_area = self.max_detection_size[0] * self.max_detection_size[1]
        size_factor = min(1.0, bbox.area() / max_area) if max_area else 0.0

        confidence = 100.0 * (0.6 + 0.2 * center_factor + 0.2 * size_factor)
        bbox.confidence = max(0.0, min(100.0, confidence))
        return bbox
