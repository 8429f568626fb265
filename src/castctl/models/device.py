"""Device description reported by discovery."""

from pydantic import BaseModel, Field


class DeviceInfo(BaseModel):
    """A receiver announced on the network."""

    name: str = Field(description="Friendly display name")
    host: str = Field(description="IP address or hostname")
    port: int = Field(default=8009, ge=1, le=65535)
    uuid: str = Field(description="Stable device identifier")
    model_name: str | None = None
    cast_type: str | None = Field(default=None, description='"cast", "audio" or "group"')
    manufacturer: str | None = None

    @property
    def address(self) -> str:
        """host:port string for display."""
        return f"{self.host}:{self.port}"

    def describe(self) -> str:
        """One-line summary used by the discover command."""
        parts = [f"{self.name} ({self.address})"]
        if self.model_name:
            parts.append(self.model_name)
        parts.append(self.uuid)
        return " | ".join(parts)
