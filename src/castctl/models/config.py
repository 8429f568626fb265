"""Application configuration model."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from castctl.utils.persistence import PydanticPersistence

DEFAULT_CONFIG_PATH = Path.home() / ".castctl" / "config.json"

URL_PLACEHOLDER = "{url}"


class HelloConfig(BaseModel):
    """Receiver used by the hello command."""

    app_id: str = Field(default="794B7BBF", description="Hello-text sample receiver")
    namespace: str = Field(default="urn:x-cast:com.google.cast.sample.helloworld")


class TicTacToeConfig(BaseModel):
    """Defaults for the tic-tac-toe client."""

    namespace: str = Field(default="urn:x-cast:com.google.cast.demo.tictactoe")
    player_name: str = Field(default="castctl", description="Name sent with the join command")


class UrlLauncher(BaseModel):
    """
    A named command that opens a URL in a fixed receiver application.

    Every string in ``payload`` has ``{url}`` replaced with the URL given on
    the command line.
    """

    app_id: str
    namespace: str
    description: str = ""
    payload: dict[str, Any] = Field(default_factory=lambda: {"url": URL_PLACEHOLDER})

    def build_payload(self, url: str) -> dict[str, Any]:
        """Return the message to send for ``url``."""
        return _substitute(self.payload, url)


def _substitute(value: Any, url: str) -> Any:
    if isinstance(value, str):
        return value.replace(URL_PLACEHOLDER, url)
    if isinstance(value, dict):
        return {key: _substitute(item, url) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute(item, url) for item in value]
    return value


def _default_launchers() -> dict[str, UrlLauncher]:
    return {
        "dashcast": UrlLauncher(
            app_id="84912283",
            namespace="urn:x-cast:es.offd.dashcast",
            description="Show a web page with the DashCast receiver",
            payload={"url": URL_PLACEHOLDER, "force": False, "reload": False, "reload_time": 0},
        ),
        "vlc": UrlLauncher(
            app_id="CC1AD845",
            namespace="urn:x-cast:com.google.cast.media",
            description="Play a media URL with the default media receiver",
            payload={
                "type": "LOAD",
                "media": {
                    "contentId": URL_PLACEHOLDER,
                    "streamType": "BUFFERED",
                    "contentType": "video/mp4",
                },
                "autoplay": True,
            },
        ),
    }


class AppConfig(BaseModel):
    """Application configuration and settings."""

    default_port: int = Field(default=8009, ge=1, le=65535, description="Cast control port")

    operation_timeout: float | None = Field(
        default=None,
        gt=0,
        description=(
            "Seconds to wait for connect, resolve and join before failing the command. "
            "None waits forever."
        ),
    )
    hello_grace_period: float = Field(
        default=10.0,
        ge=0,
        description="Seconds to keep the connection open after the hello message is delivered",
    )
    discover_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Stop discovery after this many seconds (None runs until interrupted)",
    )

    hello: HelloConfig = Field(default_factory=HelloConfig)
    tictactoe: TicTacToeConfig = Field(default_factory=TicTacToeConfig)
    launchers: dict[str, UrlLauncher] = Field(
        default_factory=_default_launchers,
        description="Named URL-launch commands",
    )

    @field_validator("launchers")
    @classmethod
    def validate_launcher_names(cls, v: dict[str, UrlLauncher]) -> dict[str, UrlLauncher]:
        """Launcher names become CLI commands and must not shadow built-ins."""
        from castctl.cli.registry import BUILTIN_COMMANDS

        clashes = sorted(set(v) & BUILTIN_COMMANDS)
        if clashes:
            raise ValueError(f"launcher names clash with built-in commands: {', '.join(clashes)}")
        return v

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.castctl/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or DEFAULT_CONFIG_PATH, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
