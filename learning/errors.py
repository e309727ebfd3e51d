"""
Dashboard error taxonomy.

Remote failures are raised where the gateway is called and converted into a
user-visible notification by the HTTP layer. None of them is fatal.
"""

from __future__ import annotations


class DashboardError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthRequired(DashboardError):
    """No active session; the client must go back to the sign-in page."""
    kind = "auth_required"
    status_code = 401
    redirect = "/auth"


class RemoteReadFailure(DashboardError):
    kind = "read_failure"
    status_code = 502

    def __init__(self, resource: str, reason: str = ""):
        super().__init__(f"Failed to load {resource}" + (f": {reason}" if reason else ""))
        self.resource = resource


class RemoteWriteFailure(DashboardError):
    kind = "write_failure"
    status_code = 502

    def __init__(self, operation: str, reason: str = ""):
        super().__init__(f"Failed to {operation}" + (f": {reason}" if reason else ""))
        self.operation = operation


class NoOpCondition(DashboardError):
    """Informational: the requested change is already in effect."""
    kind = "info"
    status_code = 200
