"""HTTP services for Hearth Calendar."""

from .server import app, calendar_ics, invoke_api_function, list_api_functions, run_local_server

__all__ = [
    "app",
    "calendar_ics",
    "invoke_api_function",
    "list_api_functions",
    "run_local_server",
]
