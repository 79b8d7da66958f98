"""Debug utilities for recorder visibility.

Thread-safe debug printing with rich formatting, enabled per thread or
through the ``HTTP_RECORDER_DEBUG`` setting.
"""

import json
import threading
from typing import Any

from rich.console import Console
from rich.syntax import Syntax

from httprecorder.config import is_debug_enabled_from_env

# Thread-local storage for debug state
_debug_state = threading.local()


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled for the current thread or by configuration."""
    enabled = getattr(_debug_state, "enabled", None)
    if enabled is None:
        enabled = is_debug_enabled_from_env()
        _debug_state.enabled = enabled
    return enabled


def debug_print(category: str, message: str, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (mode, record, replay, context)
        message: Main message to display
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    console = Console(stderr=True)
    console.print(f"[DEBUG:{category}] {message}", style="bold cyan", markup=False)
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            try:
                json_str = json.dumps(value, indent=2)
                syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)
                console.print(f"  {key}:", style="dim", markup=False)
                console.print(syntax)
            except (TypeError, ValueError):
                console.print(f"  {key}: {value}", style="dim", markup=False)
        elif isinstance(value, list):
            console.print(f"  {key}: {', '.join(str(v) for v in value)}", style="dim", markup=False)
        elif isinstance(value, str) and len(value) > 100:
            # Truncate long strings
            console.print(
                f"  {key}: {value[:100]}... ({len(value)} chars)", style="dim", markup=False
            )
        else:
            console.print(f"  {key}: {value}", style="dim", markup=False)


def debug_exchange(
    mode: str,
    method: str,
    url: str,
    status_code: int | None = None,
    elapsed: float | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log one intercepted exchange in debug mode.

    Args:
        mode: Resolved execution mode that handled the call
        method: Request method
        url: Request URL
        status_code: Response status, when one was produced
        elapsed: Seconds spent on the call (recording only)
        headers: Response headers to show
    """
    if not is_debug_enabled():
        return
    debug_print(
        mode.lower(),
        f"{method} {url}",
        Status=status_code,
        Elapsed=f"{elapsed * 1000:.1f} ms" if elapsed is not None else None,
        Headers=headers,
    )
