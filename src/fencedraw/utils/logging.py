"""Logging utilities for Fencedraw."""

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_HANDLER_NAMES = ("fencedraw-console", "fencedraw-file")

# Most recent rejections kept for inspection
MAX_RECENT_REJECTIONS = 100


@dataclass
class SessionStats:
    """Statistics accumulated by a drawing session."""

    validations: int = 0
    rejections: int = 0
    reverts: int = 0
    snaps: int = 0
    snap_misses: int = 0
    splits: int = 0
    subpolygons: int = 0
    rejected: deque[tuple[str, str]] = field(
        default_factory=lambda: deque(maxlen=MAX_RECENT_REJECTIONS)
    )

    @property
    def rejection_rate(self) -> float:
        """Share of validations that rejected the feature."""
        if self.validations:
            return self.rejections / self.validations
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (console only if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Drop handlers installed by an earlier call
    for handler in list(root_logger.handlers):
        if handler.get_name() in _HANDLER_NAMES:
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name("fencedraw-file")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.set_name("fencedraw-console")
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("fencedraw")
    logger.info("Logging initialized", log_file=str(log_file) if log_file else None, level=file_level)

    return logger


class SessionLogger:
    """Logger for drawing session events and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger("fencedraw.session")
        self._stats = SessionStats()

    def log_validation(self, feature_id: str, phase: str, valid: bool, reason: str | None) -> None:
        """Log a validation outcome."""
        self._stats.validations += 1
        if valid:
            self._logger.debug("Feature valid", feature=feature_id, phase=phase)
            return
        self._stats.rejections += 1
        self._stats.rejected.append((feature_id, reason or ""))
        self._logger.warning("Validation failed", feature=feature_id, phase=phase, reason=reason)

    def log_revert(self, feature_id: str, version: int | None) -> None:
        """Log a rejected drag being rolled back."""
        self._stats.reverts += 1
        if version is None:
            self._logger.error("No previous state found for feature", feature=feature_id)
        else:
            self._logger.info("Feature reverted", feature=feature_id, version=version)

    def log_snap(self, cursor: tuple[float, float], snapped: tuple[float, float] | None) -> None:
        """Log a snap query."""
        if snapped is None:
            self._stats.snap_misses += 1
            return
        self._stats.snaps += 1
        self._logger.debug("Snapped", cursor=list(cursor), snapped=list(snapped))

    def log_split(self, line_count: int, subpolygon_count: int, duration_ms: float) -> None:
        """Log a boundary split."""
        self._stats.splits += 1
        self._stats.subpolygons += subpolygon_count
        self._logger.info(
            "Boundary split",
            lines=line_count,
            subpolygons=subpolygon_count,
            duration_ms=round(duration_ms, 2),
        )

    def log_option_change(self, option: str, old: object, new: object) -> None:
        """Log a session option change."""
        self._logger.info("Option changed", option=option, old=old, new=new)

    @property
    def stats(self) -> SessionStats:
        """Get current session statistics."""
        return self._stats
