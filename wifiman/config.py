from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .domain.models import WirelessNetwork


class ProviderEnum(str, Enum):
    AUTO = "auto"
    WINDOWS = "windows"
    LINUX = "linux"
    MOCK = "mock"
    UNSUPPORTED = "unsupported"


class LinuxBackendEnum(str, Enum):
    PLACEHOLDER = "placeholder"
    NMCLI = "nmcli"


class LoggingConfig(BaseModel):
    level: str = Field("WARNING")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level: {value}")
        return value


class LinuxConfig(BaseModel):
    backend: LinuxBackendEnum = Field(LinuxBackendEnum.PLACEHOLDER)
    nmcli_path: str = Field("nmcli")
    interface: str | None = Field(None)  # None = let nmcli pick the device
    scan_timeout: float = Field(15.0, gt=0)

    @field_validator("interface")
    @classmethod
    def _validate_interface(cls, value: str | None) -> str | None:
        if value is not None and (not value or any(c.isspace() for c in value)):
            raise ValueError("interface must be a device name without whitespace")
        return value


class WindowsConfig(BaseModel):
    client_version: int = Field(2, ge=1, le=2)  # WlanOpenHandle client version
    netsh_path: str = Field("netsh")


class MockConfig(BaseModel):
    networks: list[WirelessNetwork] = Field(default_factory=list)
    accept_connect: bool = Field(True)
    fail_open: bool = Field(False)


class WifiConfig(BaseModel):
    provider: ProviderEnum = Field(ProviderEnum.AUTO)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    linux: LinuxConfig = Field(default_factory=LinuxConfig)
    windows: WindowsConfig = Field(default_factory=WindowsConfig)
    mock: MockConfig = Field(default_factory=MockConfig)


def load_config(path: Path) -> WifiConfig:
    with Path(path).expanduser().open("r", encoding="utf-8") as fp:
        raw = yaml.safe_load(fp) or {}
    try:
        return WifiConfig.model_validate(raw)
    except ValidationError as exc:  # pragma: no cover - formatting
        raise ValueError(str(exc)) from exc


def resolve_config_path(cli_path: Path | None) -> Path:
    """Resolve config path by priority: CLI, env, /etc/wifiman, repo configs."""
    candidates: list[Path] = []
    if cli_path:
        p = Path(cli_path).expanduser()
        if p.exists():
            return p.resolve()
        candidates.append(p)
    env = os.environ.get("WIFIMAN_CONFIG")
    if env:
        p = Path(env).expanduser()
        if p.exists():
            return p.resolve()
        candidates.append(p)
    for p in [Path("/etc/wifiman/wifiman.yml"), Path("configs/wifiman.yml")]:
        if p.exists():
            return p.resolve()
        candidates.append(p)
    # Fall back to the first candidate so a missing file surfaces consistently
    return candidates[0] if candidates else Path("configs/wifiman.yml").resolve()


def load_config_or_default(path: Path | None) -> WifiConfig:
    """Load the resolved config, or defaults when no config file exists."""
    resolved = resolve_config_path(path)
    if not resolved.exists():
        return WifiConfig()
    return load_config(resolved)
