"""Error taxonomy shared by the navigator core and the HTTP layer.

Every error carries a machine-readable ``code`` (used in API error payloads)
and a human-readable ``message`` suitable for a transient UI status line.
"""

from __future__ import annotations


class NavigatorError(Exception):
    """Base class for all navigator failures."""

    code = "navigator_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FormatError(NavigatorError):
    """Malformed duration or date-time text entered by the user."""

    code = "format_error"
    status_code = 400


class PreconditionError(NavigatorError):
    """Projection attempted while no window is active."""

    code = "precondition_failed"
    status_code = 409


class MalformedPaneDataError(NavigatorError):
    """The ``panes`` query parameter does not hold a JSON object."""

    code = "malformed_pane_data"
    status_code = 422


class HostUnavailableError(NavigatorError):
    """No active target URL is known or navigation was refused."""

    code = "host_unavailable"
    status_code = 503


class NavigationInProgressError(NavigatorError):
    """A previous navigation for the same session has not settled yet."""

    code = "navigation_in_progress"
    status_code = 429


__all__ = [
    "NavigatorError",
    "FormatError",
    "PreconditionError",
    "MalformedPaneDataError",
    "HostUnavailableError",
    "NavigationInProgressError",
]
