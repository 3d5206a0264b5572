"""Tests for structured logging configuration.

Verifies that structured logging is configured for both console and JSON
output, and that verification events carry their context as key/value
pairs.
"""

import asyncio
import logging
from unittest.mock import patch

import pytest
import structlog
from structlog.testing import capture_logs

from catalog_verifier.logging_config import batch_context, get_logger, setup_logging
from catalog_verifier.repositories.memory_repo import InMemoryCatalogRepository
from catalog_verifier.services.verification_service import VerificationService


class TestSetupLogging:
    """Test logging setup function."""

    def test_setup_logging_with_json_mode(self):
        """setup_logging configures JSON output for batch runs."""
        setup_logging(json_logs=True, log_level="INFO")

        logger = get_logger("test")

        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
        assert hasattr(logger, "error")

    def test_setup_logging_with_human_readable_mode(self):
        """setup_logging configures console output for local use."""
        setup_logging(json_logs=False, log_level="INFO")

        assert get_logger("test") is not None

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "info"])
    def test_accepts_log_levels(self, level):
        setup_logging(json_logs=False, log_level=level)

    def test_unknown_level_is_rejected(self):
        with pytest.raises(AttributeError):
            setup_logging(json_logs=False, log_level="CHATTY")

    def test_json_renderer_is_last_processor(self):
        setup_logging(json_logs=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_is_last_processor(self):
        setup_logging(json_logs=False)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


    def test_http_request_logs_quieted_outside_debug(self):
        setup_logging(log_level="INFO")
        assert logging.getLogger("httpx").level == logging.WARNING

        setup_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG


class TestBatchContext:
    """Events inside a batch carry its id, including events from its tasks."""

    def test_binds_and_unbinds(self):
        with batch_context("batch-1", products=3) as batch_id:
            assert batch_id == "batch-1"
            assert structlog.contextvars.get_contextvars() == {"batch_id": "batch-1", "products": 3}

        assert "batch_id" not in structlog.contextvars.get_contextvars()

    def test_generates_id(self):
        with batch_context() as first:
            pass
        with batch_context() as second:
            pass

        assert first and second and first != second

    def test_tasks_inherit_the_batch_id(self):
        async def seen_by_task():
            return structlog.contextvars.get_contextvars().get("batch_id")

        async def run():
            with batch_context("batch-2"):
                return await asyncio.gather(seen_by_task(), seen_by_task())

        assert asyncio.run(run()) == ["batch-2", "batch-2"]


class TestLoggerUsage:
    """Loggers accept event names with structured context."""

    def test_logger_has_standard_methods(self):
        setup_logging(json_logs=False)
        logger = get_logger("test")

        for method in ("debug", "info", "warning", "error", "critical"):
            assert hasattr(logger, method)

    def test_event_with_context(self):
        logger = get_logger("catalog_verifier.tests")

        with capture_logs() as logs:
            logger.info("batch_verification_completed", products=3, verified=2)

        assert logs == [{
            "event": "batch_verification_completed",
            "products": 3,
            "verified": 2,
            "log_level": "info",
        }]

    def test_handles_awkward_values(self):
        setup_logging(json_logs=True)
        logger = get_logger("test")

        # None, nested data and control characters must not break rendering
        logger.info("test_event", value=None, data={"nested": {"value": 42}}, text="Hello\nWorld\t!")


class TestServiceEvents:
    """The batch service reports degraded lookups as warnings."""

    def test_failing_lookup_is_logged(self, engine, catalog_data):
        class BrokenUnits(InMemoryCatalogRepository):
            def resolve_units(self, codes):
                raise ConnectionError("units table unavailable")

        repo = BrokenUnits.from_dict(catalog_data)
        service = VerificationService(verification_engine=engine, repository=repo)

        with patch("catalog_verifier.services.verification_service.logger") as logger:
            asyncio.run(service.verify_batch([repo.get_product(1)]))

        logger.warning.assert_called_once_with(
            "reference_lookup_failed", lookup="units", error="units table unavailable",
        )
        event, = logger.info.call_args.args
        assert event == "batch_verification_completed"
        assert logger.info.call_args.kwargs["products"] == 1
