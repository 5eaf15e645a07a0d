"""
Error handling for Sway Zone Navigator.

Structured error codes for layout loading and Sway IPC failures. Conditions
that simply mean "nothing to do" (no focused window, no zone in the requested
direction) are not errors and never raise; see NavigationOutcome.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for Sway Zone Navigator.

    Custom codes (1000-1999):
    - 1100-1199: Layout/configuration errors
    - 1400-1499: Sway IPC errors
    - 1500-1599: State errors
    """

    # Layout/configuration errors (1100-1199)
    LAYOUT_LOAD_FAILED = 1100

    # Sway IPC errors (1400-1499)
    SWAY_NOT_RUNNING = 1400
    SWAY_IPC_FAILED = 1401
    WINDOW_MOVE_FAILED = 1402

    # State errors (1500-1599)
    DAEMON_NOT_INITIALIZED = 1500


class ZoneNavigatorError(Exception):
    """Base exception for zone navigator errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize zone navigator error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured logging.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class LayoutLoadError(ZoneNavigatorError):
    """Layout file could not be read or failed validation."""

    def __init__(self, file_path: str, reason: str):
        """
        Initialize layout load error.

        Args:
            file_path: Path to layouts file
            reason: Reason for load failure
        """
        super().__init__(
            code=ErrorCode.LAYOUT_LOAD_FAILED,
            message=f"Failed to load layouts from {file_path}: {reason}",
            suggestion="Check file syntax and zone percentages",
            context={"file_path": file_path, "reason": reason}
        )


class SwayIPCError(ZoneNavigatorError):
    """Sway IPC communication error."""

    def __init__(self, operation: str, reason: str):
        """
        Initialize Sway IPC error.

        Args:
            operation: IPC operation that failed
            reason: Reason for failure
        """
        super().__init__(
            code=ErrorCode.SWAY_IPC_FAILED,
            message=f"Sway IPC {operation} failed: {reason}",
            suggestion="Ensure Sway is running and IPC socket is accessible",
            context={"operation": operation, "reason": reason}
        )


class WindowMoveError(ZoneNavigatorError):
    """The compositor refused or could not complete a window move."""

    def __init__(self, window_id: int, reason: str):
        super().__init__(
            code=ErrorCode.WINDOW_MOVE_FAILED,
            message=f"Failed to move window {window_id}: {reason}",
            suggestion="The window may have closed; retry the binding",
            context={"window_id": window_id, "reason": reason}
        )
        self.window_id = window_id
        self.reason = reason
