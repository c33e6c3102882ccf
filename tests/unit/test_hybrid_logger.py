"""
Tests for HybridLogger
"""
import logging

import pytest

from nedc_admin.infrastructure.logging.hybrid_logger import HybridLogger


class TestHybridLogger:

    @pytest.mark.asyncio
    async def test_business_event_carries_metadata(self, caplog):
        logger = HybridLogger(log_dir="", name="nedc_admin.tests.business")
        caplog.set_level(logging.INFO, logger="nedc_admin.tests.business")

        await logger.business("Payment added", {"company_id": "c-1", "paid_amount": "109.00"})

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == 'BUSINESS Payment added | {"company_id": "c-1", "paid_amount": "109.00"}'

    @pytest.mark.asyncio
    async def test_files_split_by_level(self, tmp_path):
        logger = HybridLogger(log_dir=str(tmp_path), name="nedc_admin.tests.files")

        await logger.info("started")
        await logger.warning("backend slow")

        out_log = (tmp_path / "out.log").read_text(encoding="utf-8")
        error_log = (tmp_path / "error.log").read_text(encoding="utf-8")
        combined_log = (tmp_path / "combined.log").read_text(encoding="utf-8")
        assert "started" in out_log and "backend slow" in out_log
        assert "started" not in error_log and "backend slow" in error_log
        assert "started" in combined_log

        for handler in list(logger.file_logger.handlers):
            handler.close()
            logger.file_logger.removeHandler(handler)

    @pytest.mark.asyncio
    async def test_no_log_dir_means_console_only(self):
        logger = HybridLogger(log_dir="", name="nedc_admin.tests.console")

        assert len(logger.file_logger.handlers) == 1
        assert isinstance(logger.file_logger.handlers[0], logging.StreamHandler)

    @pytest.mark.asyncio
    async def test_critical_level(self, caplog):
        logger = HybridLogger(log_dir="", name="nedc_admin.tests.critical")
        caplog.set_level(logging.INFO, logger="nedc_admin.tests.critical")

        await logger.critical("Backend unreachable", {"base_url": "http://backend.test"})

        assert caplog.records[-1].levelno == logging.CRITICAL
