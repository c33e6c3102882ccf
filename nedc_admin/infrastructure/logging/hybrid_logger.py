"""
Hybrid logging for the back-office.
- everything → stdout
- INFO and above → logs/out.log
- WARNING and above → logs/error.log
- everything → logs/combined.log
- BUSINESS events (mutations against the backend) → INFO with metadata
"""
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from nedc_admin.config.settings import settings

logger = logging.getLogger(__name__)


class HybridLogger:
    """Console plus process-manager log files"""

    def __init__(self, log_dir: Optional[str] = None, name: str = "nedc_admin"):
        self.log_dir = log_dir if log_dir is not None else settings.log_dir
        self.name = name
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Console and file handlers"""
        self.file_logger = logging.getLogger(self.name)
        self.file_logger.setLevel(logging.DEBUG)

        # Handlers are attached once per logger name
        if self.file_logger.handlers:
            return

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
        console_handler.setFormatter(formatter)
        self.file_logger.addHandler(console_handler)

        for filename, level in (
            ("out.log", logging.INFO),
            ("error.log", logging.WARNING),
            ("combined.log", logging.DEBUG),
        ):
            handler = self._file_handler(filename, level)
            if handler is not None:
                handler.setFormatter(formatter)
                self.file_logger.addHandler(handler)

    def _file_handler(self, filename: str, level: int) -> Optional[logging.Handler]:
        """File handler, or None when the log directory is not writable"""
        if not self.log_dir:
            return None
        try:
            path = Path(self.log_dir)
            path.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path / filename, encoding="utf-8")
            handler.setLevel(level)
            return handler
        except OSError as e:
            # Running without files is acceptable, stdout still receives everything
            self.file_logger.warning(f"Log file {filename} unavailable: {e}")
            return None

    async def log(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Main logging method"""
        level_upper = level.upper()

        if level_upper == "BUSINESS":
            self.file_logger.info(self._with_metadata(f"BUSINESS {message}", metadata))
            return

        log_level = getattr(logging, level_upper, logging.INFO)
        self.file_logger.log(log_level, self._with_metadata(message, metadata))

    @staticmethod
    def _with_metadata(message: str, metadata: Optional[Dict[str, Any]]) -> str:
        if not metadata:
            return message
        try:
            return f"{message} | {json.dumps(metadata, ensure_ascii=False, default=str)}"
        except (TypeError, ValueError):
            return f"{message} | {metadata!r}"

    async def error(self, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Errors"""
        await self.log("ERROR", message, metadata)

    async def warning(self, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Warnings"""
        await self.log("WARNING", message, metadata)

    async def critical(self, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Critical errors"""
        await self.log("CRITICAL", message, metadata)

    async def business(self, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Business events"""
        await self.log("BUSINESS", message, metadata)

    async def info(self, message: str) -> None:
        """Informational (console and out.log)"""
        self.file_logger.info(message)

    async def debug(self, message: str) -> None:
        """Debug (console and combined.log)"""
        self.file_logger.debug(message)


# Global logger instance
hybrid_logger = HybridLogger()
