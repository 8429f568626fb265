"""
Custom exception hierarchy for castctl.

## Exception Hierarchy

```
CastCtlError (base)
├── CommandError                 fatal to the running command
│   ├── DeviceConnectionError
│   ├── DeviceDisconnectedError
│   ├── OperationTimeoutError
│   ├── ApplicationNotFoundError
│   ├── SessionStartError
│   ├── SessionNotFoundError
│   ├── SendFailedError
│   └── ProtocolError
├── CommandStateError            caller errors, always propagate
├── DeviceNotConnectedError
├── SessionStateError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `CastCtlError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

Orchestrators catch `CommandError` at the step where it happens, log it at
error level and stop the device. Nothing is retried.
"""

from .base import CastCtlError
from .command import (
    ApplicationNotFoundError,
    CommandError,
    DeviceConnectionError,
    DeviceDisconnectedError,
    OperationTimeoutError,
    ProtocolError,
    SendFailedError,
    SessionNotFoundError,
    SessionStartError,
)
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    format_error_for_display,
    wrap_pydantic_error,
    wrap_transport_error,
)
from .state import CommandStateError, DeviceNotConnectedError, SessionStateError

__all__ = [
    "ApplicationNotFoundError",
    # Base
    "CastCtlError",
    # Command
    "CommandError",
    "CommandStateError",
    "ConfigFileInvalidError",
    "ConfigValidationError",
    # Config
    "ConfigurationError",
    "DeviceConnectionError",
    "DeviceDisconnectedError",
    "DeviceNotConnectedError",
    "OperationTimeoutError",
    "ProtocolError",
    "SendFailedError",
    "SessionNotFoundError",
    "SessionStartError",
    "SessionStateError",
    # Handlers
    "format_error_for_display",
    "wrap_pydantic_error",
    "wrap_transport_error",
]
