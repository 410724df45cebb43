"""
Error types for the sway autolayout daemon.

Every error here is terminal for the task that raises it: nothing is retried.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for the autolayout daemon.

    - 1400-1499: Sway IPC (control channel) errors
    - 1500-1599: Layout decision errors
    - 1600-1699: Event stream errors
    """

    # Sway IPC errors (1400-1499)
    SWAY_NOT_RUNNING = 1400
    SWAY_IPC_FAILED = 1401
    EVENT_STREAM_FAILED = 1403

    # Decision errors (1500-1599)
    NO_FOCUSED_NODE = 1500
    NO_PARENT = 1501
    NO_FOCUSED_WORKSPACE = 1502

    # Event errors (1600-1699)
    UNEXPECTED_EVENT = 1600


class AutolayoutError(Exception):
    """Base exception for autolayout daemon errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize autolayout error.

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
        Convert error to a dictionary for structured logging.

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


class ChannelConnectError(AutolayoutError):
    """Could not open a connection to the Sway IPC socket."""

    def __init__(self, reason: str, socket_path: Optional[str] = None):
        super().__init__(
            code=ErrorCode.SWAY_NOT_RUNNING,
            message=f"Failed to connect to Sway IPC: {reason}",
            suggestion="Ensure Sway is running and SWAYSOCK points at its socket",
            context={"socket_path": socket_path, "reason": reason}
        )


class RequestError(AutolayoutError):
    """A request on an open connection failed at the transport level."""

    def __init__(self, operation: str, reason: str):
        """
        Initialize Sway IPC request error.

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


class EventStreamError(AutolayoutError):
    """The event subscription broke for a reason other than the socket closing."""

    def __init__(self, reason: str):
        super().__init__(
            code=ErrorCode.EVENT_STREAM_FAILED,
            message=f"Sway event stream failed: {reason}",
            context={"reason": reason}
        )


class DecisionError(AutolayoutError):
    """The layout engine could not derive what it needs from the tree."""


class NoFocusedNodeError(DecisionError):
    def __init__(self):
        super().__init__(code=ErrorCode.NO_FOCUSED_NODE, message="No focused node")


class NoParentError(DecisionError):
    def __init__(self):
        super().__init__(code=ErrorCode.NO_PARENT, message="No parent")


class NoFocusedWorkspaceError(DecisionError):
    def __init__(self):
        super().__init__(code=ErrorCode.NO_FOCUSED_WORKSPACE, message="No focused workspace")


class UnexpectedEventError(AutolayoutError):
    """An event arrived that the subscription never asked for."""

    def __init__(self, kind: str):
        super().__init__(
            code=ErrorCode.UNEXPECTED_EVENT,
            message=f"Unexpected event kind: {kind}",
            context={"kind": kind}
        )
