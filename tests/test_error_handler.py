"""Unit tests for the error taxonomy and error tracking."""

import unittest
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.services.error_handler import (
    SecurityError, InvalidArgumentError, CollaboratorFailure, RepositoryError,
    ImageServiceError, ErrorHandler, ErrorSeverity, require, track_errors
)


class TestErrorTaxonomy(unittest.TestCase):
    """Test cases for the exception hierarchy."""

    def test_hierarchy(self):
        """Every error is a SecurityError; collaborator errors share a base."""
        self.assertTrue(issubclass(InvalidArgumentError, SecurityError))
        self.assertTrue(issubclass(InvalidArgumentError, ValueError))
        self.assertTrue(issubclass(RepositoryError, CollaboratorFailure))
        self.assertTrue(issubclass(ImageServiceError, CollaboratorFailure))
        self.assertTrue(issubclass(CollaboratorFailure, SecurityError))

    def test_require(self):
        """require passes values through and rejects None."""
        self.assertEqual(require(0, "count"), 0)
        with self.assertRaises(InvalidArgumentError) as ctx:
            require(None, "sensor")
        self.assertIn("sensor", str(ctx.exception))


class TestErrorHandler(unittest.TestCase):
    """Test cases for ErrorHandler."""

    def setUp(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler(max_records=3)

    def test_register_component(self):
        """Registered components start with no errors."""
        self.error_handler.register_component("repository")

        stats = self.error_handler.get_error_stats()
        self.assertEqual(stats["component_error_counts"], {"repository": 0})
        self.assertEqual(stats["total_errors"], 0)

    def test_handle_error(self):
        """Handled errors are recorded and counted per component."""
        error = RepositoryError("disk full")

        record = self.error_handler.handle_error("repository", error, ErrorSeverity.CRITICAL)

        self.assertIs(record.error, error)
        self.assertEqual(record.severity, ErrorSeverity.CRITICAL)
        self.assertEqual(self.error_handler.get_error_stats()["component_error_counts"]["repository"], 1)

    def test_records_are_bounded(self):
        """Only the most recent records are kept."""
        for i in range(5):
            self.error_handler.handle_error("camera", ImageServiceError(str(i)))

        self.assertEqual(len(self.error_handler.error_records), 3)
        self.assertEqual(str(self.error_handler.error_records[0].error), "2")
        self.assertEqual(self.error_handler.component_error_counts["camera"], 5)

    def test_reset_error_counts(self):
        """Counts can be reset for one component or all of them."""
        self.error_handler.handle_error("camera", ImageServiceError("a"))
        self.error_handler.handle_error("repository", RepositoryError("b"))

        self.error_handler.reset_error_counts("camera")
        self.assertEqual(self.error_handler.component_error_counts["camera"], 0)
        self.assertEqual(self.error_handler.component_error_counts["repository"], 1)

        self.error_handler.reset_error_counts()
        self.assertEqual(self.error_handler.get_error_stats()["total_errors"], 0)

    def test_error_summary(self):
        """The summary counts recent errors by component and severity."""
        self.error_handler.handle_error("camera", ImageServiceError("a"), ErrorSeverity.LOW)
        self.error_handler.handle_error("camera", ImageServiceError("b"), ErrorSeverity.HIGH)

        summary = self.error_handler.get_error_summary(hours=1)

        self.assertEqual(summary["total_errors"], 2)
        self.assertEqual(summary["component_counts"], {"camera": 2})
        self.assertEqual(summary["severity_counts"]["low"], 1)
        self.assertEqual(summary["severity_counts"]["high"], 1)


class TestTrackErrors(unittest.TestCase):
    """Test cases for the track_errors decorator."""

    def setUp(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler()

    def test_success_passes_through(self):
        """Return values pass through untouched."""
        @track_errors("engine", error_handler=self.error_handler)
        def add(a, b):
            return a + b

        self.assertEqual(add(2, 3), 5)
        self.assertEqual(self.error_handler.get_error_stats()["total_errors"], 0)

    def test_failure_recorded_and_reraised(self):
        """Collaborator failures are recorded and re-raised unchanged."""
        error = RepositoryError("locked")

        @track_errors("engine", error_handler=self.error_handler)
        def fail():
            raise error

        with self.assertRaises(RepositoryError) as ctx:
            fail()

        self.assertIs(ctx.exception, error)
        self.assertEqual(self.error_handler.error_records[0].severity, ErrorSeverity.HIGH)

    def test_invalid_argument_not_recorded(self):
        """Invalid arguments are re-raised without being recorded."""
        @track_errors("engine", error_handler=self.error_handler)
        def reject():
            require(None, "sensor")

        with self.assertRaises(InvalidArgumentError):
            reject()

        self.assertEqual(self.error_handler.get_error_stats()["total_errors"], 0)


if __name__ == '__main__':
    unittest.main()
