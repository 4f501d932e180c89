"""
Error handling for the waveform simulator.

This module provides the error taxonomy, a centralized handler that
classifies, logs and records errors, and diagnostic reporting. None of the
errors are fatal: invalid input is surfaced as per-field messages and
generation is simply withheld.
"""

import logging
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import wraps
from typing import Any, Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""

    INPUT_MISSING = "input_missing"
    OUT_OF_RANGE = "out_of_range"
    CONSTRAINT_VIOLATION = "constraint_violation"
    UNIT_ERROR = "unit_error"
    CONFIGURATION_ERROR = "configuration_error"
    COMPUTATION_ERROR = "computation_error"
    SYSTEM_ERROR = "system_error"


@dataclass
class ErrorContext:
    """Context information for error handling."""

    operation: str
    component: str
    parameters: Dict[str, Any]
    timestamp: datetime
    system_info: Dict[str, Any]


@dataclass
class ErrorReport:
    """Record of a handled error."""

    error_id: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    context: ErrorContext
    traceback_info: str
    field_errors: Dict[str, str]


class WaveformError(Exception):
    """Base exception class for waveform simulator errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.SYSTEM_ERROR,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context
        self.timestamp = datetime.now()


class GenerationError(WaveformError):
    """Waveform synthesis could not be carried out."""

    def __init__(
        self, message: str, operation: str = "", severity: ErrorSeverity = ErrorSeverity.HIGH
    ):
        super().__init__(message, ErrorCategory.COMPUTATION_ERROR, severity)
        self.operation = operation


class ErrorHandler:
    """Centralized error classification, logging and history."""

    MAX_HISTORY = 1000

    def __init__(self, log_level: int = logging.WARNING):
        """Initialize error handler.

        Args:
            log_level: Minimum log level for error reporting
        """
        self.log_level = log_level
        self.error_history: List[ErrorReport] = []
        self.statistics = {"total_errors": 0, "validation_errors": 0, "critical_failures": 0}

        logger.debug("ErrorHandler initialized")

    def handle_error(self, error: Exception, context: Optional[ErrorContext] = None) -> ErrorReport:
        """Classify, log and record an error.

        Args:
            error: Exception that occurred
            context: Context information about the error

        Returns:
            ErrorReport describing the error
        """
        error_id = f"ERR_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.error_history):04d}"
        category, severity = self._classify_error(error)

        report = ErrorReport(
            error_id=error_id,
            category=category,
            severity=severity,
            message=str(error),
            context=context or self._create_default_context(),
            traceback_info=traceback.format_exc(),
            field_errors=dict(getattr(error, "errors", {}) or {}),
        )

        self.statistics["total_errors"] += 1
        if report.field_errors:
            self.statistics["validation_errors"] += 1
        if severity == ErrorSeverity.CRITICAL:
            self.statistics["critical_failures"] += 1

        self._log_error(report)

        self.error_history.append(report)
        if len(self.error_history) > self.MAX_HISTORY:
            self.error_history = self.error_history[-self.MAX_HISTORY // 2 :]

        return report

    def _classify_error(self, error: Exception) -> tuple:
        """Classify error by category and severity.

        Returns:
            Tuple of (category, severity)
        """
        from .config_manager import ConfigurationError
        from .units import UnitError
        from .validation import IssueKind, ValidationError

        if isinstance(error, WaveformError):
            return error.category, error.severity

        if isinstance(error, ValidationError):
            kinds = {issue.kind for issue in error.issues.values()}
            if IssueKind.CONSTRAINT_VIOLATION in kinds:
                return ErrorCategory.CONSTRAINT_VIOLATION, ErrorSeverity.LOW
            if IssueKind.OUT_OF_RANGE in kinds:
                return ErrorCategory.OUT_OF_RANGE, ErrorSeverity.LOW
            return ErrorCategory.INPUT_MISSING, ErrorSeverity.LOW

        if isinstance(error, UnitError):
            return ErrorCategory.UNIT_ERROR, ErrorSeverity.LOW

        if isinstance(error, ConfigurationError):
            return ErrorCategory.CONFIGURATION_ERROR, ErrorSeverity.HIGH

        if isinstance(error, (FloatingPointError, OverflowError, ZeroDivisionError)):
            return ErrorCategory.COMPUTATION_ERROR, ErrorSeverity.MEDIUM

        if isinstance(error, (SystemExit, KeyboardInterrupt)):
            return ErrorCategory.SYSTEM_ERROR, ErrorSeverity.CRITICAL

        return ErrorCategory.SYSTEM_ERROR, ErrorSeverity.MEDIUM

    def _create_default_context(self) -> ErrorContext:
        return ErrorContext(
            operation="unknown",
            component="unknown",
            parameters={},
            timestamp=datetime.now(),
            system_info=self._get_system_info(),
        )

    def _get_system_info(self) -> Dict[str, Any]:
        return {
            "python_version": sys.version,
            "platform": sys.platform,
            "numpy_version": np.__version__,
        }

    def _log_error(self, report: ErrorReport) -> None:
        log_message = f"[{report.error_id}] {report.category.value.upper()}: {report.message}"

        if report.severity == ErrorSeverity.CRITICAL:
            logger.critical(log_message)
        elif report.severity == ErrorSeverity.HIGH:
            logger.error(log_message)
        elif report.severity == ErrorSeverity.MEDIUM:
            logger.warning(log_message)
        else:
            logger.info(log_message)

    def get_error_statistics(self) -> Dict[str, Any]:
        """Get error counts, broken down by category and severity."""
        stats = dict(self.statistics)

        category_counts: Dict[str, int] = {}
        severity_counts: Dict[str, int] = {}
        for report in self.error_history:
            category_counts[report.category.value] = (
                category_counts.get(report.category.value, 0) + 1
            )
            severity_counts[report.severity.value] = (
                severity_counts.get(report.severity.value, 0) + 1
            )

        stats["category_breakdown"] = category_counts
        stats["severity_breakdown"] = severity_counts
        return stats

    def generate_diagnostic_report(self, include_traceback: bool = False) -> str:
        """Generate a plain-text diagnostic report.

        Args:
            include_traceback: Include full traceback information

        Returns:
            Formatted diagnostic report
        """
        report = []
        report.append("=" * 80)
        report.append("BROADCAST WAVEFORM SIMULATOR - ERROR DIAGNOSTIC REPORT")
        report.append("=" * 80)
        report.append(f"Generated: {datetime.now().isoformat()}")
        report.append("")

        stats = self.get_error_statistics()
        report.append("ERROR STATISTICS:")
        report.append(f"  Total Errors: {stats['total_errors']}")
        report.append(f"  Validation Errors: {stats['validation_errors']}")
        report.append(f"  Critical Failures: {stats['critical_failures']}")
        report.append("")

        if stats["category_breakdown"]:
            report.append("ERROR CATEGORIES:")
            for category, count in stats["category_breakdown"].items():
                report.append(f"  {category}: {count}")
            report.append("")

        recent_errors = self.error_history[-10:]
        if recent_errors:
            report.append("RECENT ERRORS (last 10):")
            for error_report in recent_errors:
                report.append(
                    f"  [{error_report.error_id}] {error_report.category.value}: {error_report.message}"
                )
                for field_name, message in error_report.field_errors.items():
                    report.append(f"    {field_name}: {message}")
                if include_traceback and error_report.traceback_info:
                    report.append(f"    Traceback: {error_report.traceback_info}")
            report.append("")

        system_info = self._get_system_info()
        report.append("SYSTEM INFORMATION:")
        report.append(f"  Python Version: {system_info['python_version']}")
        report.append(f"  Platform: {system_info['platform']}")
        report.append(f"  NumPy Version: {system_info['numpy_version']}")
        report.append("=" * 80)

        return "\n".join(report)

    def clear_error_history(self) -> None:
        """Clear error history and reset statistics."""
        self.error_history.clear()
        self.statistics = {"total_errors": 0, "validation_errors": 0, "critical_failures": 0}
        logger.info("Error history and statistics cleared")


# Global error handler instance
_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler


def handle_error(error: Exception, context: Optional[ErrorContext] = None) -> ErrorReport:
    """Handle an error using the global error handler."""
    return get_error_handler().handle_error(error, context)


def create_error_context(operation: str, component: str, **parameters) -> ErrorContext:
    """Create error context for error handling.

    Args:
        operation: Name of the operation being performed
        component: Name of the component where error occurred
        **parameters: Additional parameters to include in context

    Returns:
        ErrorContext object
    """
    return ErrorContext(
        operation=operation,
        component=component,
        parameters=parameters,
        timestamp=datetime.now(),
        system_info=get_error_handler()._get_system_info(),
    )


def with_error_handling(operation: str = "", component: str = ""):
    """Decorator that reports errors to the global handler and re-raises them.

    Args:
        operation: Name of the operation
        component: Name of the component
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                context = create_error_context(
                    operation=operation or func.__name__,
                    component=component or func.__module__,
                    args=str(args)[:200],
                    kwargs=str(kwargs)[:200],
                )
                handle_error(e, context)
                raise

        return wrapper

    return decorator
