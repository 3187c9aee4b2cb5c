"""Unit tests for image classifiers."""

import unittest
import tempfile
import shutil
import os
from unittest.mock import Mock, patch
import sys

import cv2
import numpy as np
from PIL import Image

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.services.error_handler import ImageServiceError
from catpoint_security.services.image_service import (
    FakeImageService, HaarCascadeImageService, load_image
)


class TestFakeImageService(unittest.TestCase):
    """Test cases for FakeImageService."""

    def test_seeded_answers_repeat(self):
        """Two services with the same seed answer identically."""
        first = FakeImageService(seed=42)
        second = FakeImageService(seed=42)

        answers = [first.image_contains_cat(None, 50.0) for _ in range(20)]

        self.assertEqual(answers, [second.image_contains_cat(None, 50.0) for _ in range(20)])
        self.assertTrue(all(isinstance(a, bool) for a in answers))

    def test_answers_both_ways(self):
        """Over many images the fake reports both cats and no cats."""
        service = FakeImageService(seed=7)

        answers = {service.image_contains_cat(None, 50.0) for _ in range(100)}

        self.assertEqual(answers, {True, False})


class TestLoadImage(unittest.TestCase):
    """Test cases for load_image."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_load_png_as_rgb_array(self):
        """Images are loaded as RGB uint8 arrays."""
        path = os.path.join(self.test_dir, "frame.png")
        Image.new("L", (40, 30), color=128).save(path)

        frame = load_image(path)

        self.assertEqual(frame.shape, (30, 40, 3))
        self.assertEqual(frame.dtype, np.uint8)

    def test_missing_file_raises(self):
        """A missing file is an image service error."""
        with self.assertRaises(ImageServiceError):
            load_image(os.path.join(self.test_dir, "missing.png"))

    def test_not_an_image_raises(self):
        """A file that is not an image is an image service error."""
        path = os.path.join(self.test_dir, "notes.png")
        with open(path, "w") as f:
            f.write("not an image")

        with self.assertRaises(ImageServiceError):
            load_image(path)


class TestHaarCascadeImageService(unittest.TestCase):
    """Test cases for HaarCascadeImageService."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = HaarCascadeImageService()
        self.frame = np.zeros((480, 640, 3), dtype=np.uint8)

    def test_default_cascade_loaded(self):
        """The bundled cat face cascade is used by default."""
        self.assertTrue(self.service.cascade_path.endswith("haarcascade_frontalcatface.xml"))
        self.assertFalse(self.service.haar_cascade.empty())

    def test_missing_cascade_raises(self):
        """A cascade path that does not exist is an image service error."""
        with self.assertRaises(ImageServiceError):
            HaarCascadeImageService(cascade_path="/nonexistent/cascade.xml")

    def test_blank_frame_has_no_cat(self):
        """A blank frame contains no cat."""
        self.assertFalse(self.service.image_contains_cat(self.frame, 50.0))

    def test_rejects_missing_or_malformed_images(self):
        """None, empty and wrongly shaped images are image service errors."""
        for image in (None, np.zeros((0, 0), dtype=np.uint8), np.zeros((2, 2, 2, 2), dtype=np.uint8)):
            with self.subTest(image=None if image is None else image.shape):
                with self.assertRaises(ImageServiceError):
                    self.service.image_contains_cat(image, 50.0)

    def test_accepts_grayscale_and_rgba(self):
        """Grayscale and RGBA frames are classified without error."""
        for frame in (np.zeros((120, 160), dtype=np.uint8), np.zeros((120, 160, 4), dtype=np.uint8)):
            with self.subTest(shape=frame.shape):
                self.assertEqual(self.service.detect_cats(frame), [])

    def test_centred_detection_scores_higher(self):
        """A hit at the frame centre scores higher than one in a corner."""
        centred = self.service._to_bounding_box(270, 190, 100, 100, 640, 480)
        corner = self.service._to_bounding_box(0, 0, 100, 100, 640, 480)

        self.assertGreater(centred.confidence, corner.confidence)
        self.assertLessEqual(centred.confidence, 100.0)
        self.assertGreaterEqual(corner.confidence, 60.0)

    def test_threshold_applied_to_detections(self):
        """The image contains a cat only if a hit reaches the threshold."""
        self.service.haar_cascade = Mock()
        self.service.haar_cascade.detectMultiScale.return_value = np.array([[270, 190, 100, 100]])

        confidence = self.service.detect_cats(self.frame)[0].confidence

        self.assertTrue(self.service.image_contains_cat(self.frame, confidence))
        self.assertFalse(self.service.image_contains_cat(self.frame, confidence + 0.1))

    def test_detection_failure_wrapped(self):
        """OpenCV errors during detection become image service errors."""
        self.service.haar_cascade = Mock()
        self.service.haar_cascade.detectMultiScale.side_effect = cv2.error("bad frame")

        with self.assertRaises(ImageServiceError):
            self.service.image_contains_cat(self.frame, 50.0)

    @patch('catpoint_security.services.image_service.cv2.CascadeClassifier')
    def test_empty_cascade_raises(self, mock_classifier):
        """A cascade file OpenCV cannot parse is an image service error."""
        mock_classifier.return_value.empty.return_value = True

        with self.assertRaises(ImageServiceError):
            HaarCascadeImageService()


if __name__ == '__main__':
    unittest.main()
