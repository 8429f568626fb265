"""Per-invocation command parameters."""

from typing import Any

from pydantic import BaseModel, Field


class CommandContext(BaseModel):
    """Parameters one command invocation was started with."""

    command: str = Field(description="Registered command name")
    host: str | None = Field(default=None, description="Device address (None for discover)")
    port: int = Field(default=8009, ge=1, le=65535)
    app_id: str | None = None
    namespace: str | None = None
    payload: Any = None

    @property
    def target(self) -> str:
        return f"{self.host}:{self.port}"
