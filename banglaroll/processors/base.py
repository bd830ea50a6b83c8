"""
Base processor class and processing context.

Provides common functionality for the pipeline processors including
logging, timing, error handling, and configuration access.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any

from ..config import Config
from ..logger import get_logger
from ..models import BatchStats
from ..utils.timing import Timer


@dataclass
class ProcessingContext:
    """
    Shared context passed between processors.

    Contains:
    - Configuration
    - The folder being processed
    - Accumulated batch statistics
    - The cancellation flag shared with worker threads
    """

    config: Config
    folder: Optional[Path] = None

    # Processing statistics
    stats: BatchStats = field(default_factory=BatchStats)

    # Set once by cancel(); checked before each file starts
    cancel_event: threading.Event = field(default_factory=threading.Event)

    # File tracking
    total_files: int = 0
    files_processed: int = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()


class BaseProcessor(ABC):
    """
    Abstract base class for pipeline processors.

    Provides:
    - Consistent logging
    - Timing instrumentation
    - Configuration access
    """

    # Processor name for logging (override in subclass)
    name: str = "BaseProcessor"

    def __init__(self, context: ProcessingContext):
        """
        Initialize processor.

        Args:
            context: Shared processing context
        """
        self.context = context
        self.config = context.config
        self.logger = get_logger(self.name)
        self._timer = Timer()

    @property
    def debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return self.config.debug

    def log_info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.info(f"{message} {extra}".strip())

    def log_warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.warning(f"{message} {extra}".strip())

    def log_error(self, message: str, error: Optional[Exception] = None) -> None:
        """Log error message."""
        if error:
            self.logger.error(f"{message}: {error}", exc_info=self.debug_mode)
        else:
            self.logger.error(message)

    @abstractmethod
    def process(self) -> bool:
        """
        Execute the processor's main task.

        Returns:
            True if processing succeeded, False otherwise
        """
        pass

    def validate(self) -> bool:
        """
        Validate that processor can run.

        Override in subclass to check prerequisites.
        """
        return True

    def run(self) -> bool:
        """
        Run processor with timing and error handling.

        Returns:
            True if processing succeeded
        """
        self.log_info(f"Starting {self.name}")
        self._timer = Timer()

        try:
            if not self.validate():
                self.log_error("Validation failed")
                return False

            result = self.process()

            elapsed = self._timer.elapsed
            self.log_info(f"Completed {self.name}", duration=f"{elapsed:.2f}s")

            return result

        except Exception as e:
            elapsed = self._timer.elapsed
            self.log_error(f"Failed after {elapsed:.2f}s", error=e)
            return False
