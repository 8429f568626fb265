"""
Centralized error handling utilities.

Errors move up through three layers:

```
┌─────────────────────────────────────────┐
│  USER LAYER (CLI)                       │
│  - Formats error.user_message           │
│  - Shows error.recovery_hint            │
└─────────────────────────────────────────┘
                  ↑ CastCtlError
┌─────────────────────────────────────────┐
│  ORCHESTRATION LAYER (commands)         │
│  - Logs CommandError, stops the device  │
└─────────────────────────────────────────┘
                  ↑ CommandError
┌─────────────────────────────────────────┐
│  TRANSPORT / SESSION LAYER              │
│  - Converts pychromecast failures       │
└─────────────────────────────────────────┘
                  ↑ Exception, OSError, pychromecast errors
```

## Quick Reference

| Scenario | Use This |
|----------|----------|
| Transport failure becomes a command error | `wrap_transport_error(e, fallback)` |
| Pydantic error while loading config | `raise wrap_pydantic_error(e, str(path)) from e` |
| Render any exception for the terminal | `format_error_for_display(e)` |
"""

from typing import Callable, Optional

from .base import CastCtlError
from .config import ConfigFileInvalidError, ConfigValidationError


def wrap_transport_error(
    error: BaseException,
    fallback: Callable[[str], CastCtlError],
) -> CastCtlError:
    """
    Convert a low-level transport failure into a castctl exception.

    Errors that are already CastCtlError pass through untouched so the most
    specific type wins; anything else is handed to ``fallback`` with a
    readable reason.

    Args:
        error: The exception raised by the transport
        fallback: Builds the command error from a reason string

    Returns:
        A CastCtlError describing the failure
    """
    if isinstance(error, CastCtlError):
        return error

    reason = str(error) or type(error).__name__
    return fallback(reason)


def wrap_pydantic_error(error: Exception, file_path: str) -> CastCtlError:
    """
    Convert Pydantic validation errors to castctl exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input'),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, CastCtlError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
