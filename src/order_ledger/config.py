"""Configuration management for the order ledger MCP server."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")
    audit_level: str | None = Field(
        default=None,
        description="Level for the per-operation audit loggers; defaults to level.",
    )

    @field_validator("level", "audit_level")
    @classmethod
    def _validate_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        name = value.strip().upper()
        if name not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return name


class LedgerSettings(BaseModel):
    sqlite_path: str = Field(default="./data/ledger.sqlite")
    sqlite_wal: bool = Field(default=True)
    timeout_seconds: float = Field(
        default=5.0,
        ge=0.1,
        le=300.0,
        description="How long a ledger call waits on a locked database before failing.",
    )
    scan_batch_size: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Rows fetched per round trip while iterating range and history scans.",
    )
    seed_sample_data: bool = Field(default=False)


class ServerSettings(BaseModel):
    instructions: str = Field(
        default=(
            "Use these tools to create, read, update and delete orders on the ledger. "
            "Deleted orders remain visible through order_history."
        )
    )
    caller_id: str = Field(
        default="mcp-client",
        description="Caller identity recorded in the audit log for every tool call.",
    )

    @field_validator("caller_id")
    @classmethod
    def _validate_caller_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("caller_id must not be blank")
        return value


class Settings(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)


ENV_KEYS = {
    "instructions": "MCP_INSTRUCTIONS",
    "caller_id": "LEDGER_CALLER_ID",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "log_audit_level": "LOG_AUDIT_LEVEL",
    "sqlite_path": "LEDGER_SQLITE_PATH",
    "sqlite_wal": "LEDGER_SQLITE_WAL",
    "timeout_seconds": "LEDGER_TIMEOUT_SECONDS",
    "scan_batch_size": "LEDGER_SCAN_BATCH_SIZE",
    "seed_sample_data": "LEDGER_SEED_SAMPLE_DATA",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_path(path: str) -> str:
    candidate = Path(path)
    root = _project_root().resolve()
    if candidate.is_absolute():
        resolved = candidate.resolve()
    else:
        resolved = (root / candidate).resolve()
    if not resolved.is_relative_to(root):
        raise ValueError(f"Path traversal detected: '{path}' resolves outside project root")
    return str(resolved)


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    log_file_env = os.getenv(ENV_KEYS["log_file"])

    settings_data: dict[str, object] = {
        "server": {
            "instructions": os.getenv(ENV_KEYS["instructions"], ServerSettings().instructions),
            "caller_id": os.getenv(ENV_KEYS["caller_id"], ServerSettings().caller_id),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _resolve_path(log_file_env) if log_file_env else None,
            "audit_level": os.getenv(ENV_KEYS["log_audit_level"]) or None,
        },
        "ledger": {
            "sqlite_path": _resolve_path(
                os.getenv(ENV_KEYS["sqlite_path"], LedgerSettings().sqlite_path)
            ),
            "sqlite_wal": _env_bool(ENV_KEYS["sqlite_wal"], LedgerSettings().sqlite_wal),
            "timeout_seconds": _env_float(
                ENV_KEYS["timeout_seconds"],
                LedgerSettings().timeout_seconds,
            ),
            "scan_batch_size": _env_int(
                ENV_KEYS["scan_batch_size"],
                LedgerSettings().scan_batch_size,
            ),
            "seed_sample_data": _env_bool(
                ENV_KEYS["seed_sample_data"],
                LedgerSettings().seed_sample_data,
            ),
        },
    }

    try:
        settings = Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    Path(settings.ledger.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    return settings
