import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from release_digest.domain.errors import SettingsError

DEFAULT_SETTINGS_PATH = Path("settings.json")
ENV_PREFIX = "RELEASE_DIGEST_"

# 2 MiB suits most mail providers; 512 KiB is the conservative alternative.
DEFAULT_PAGE_MAX_BYTES = 2 * 1024 * 1024


@dataclass(frozen=True)
class AppSettings:
    username: str
    token: str = ""
    mail_from: str = ""
    mail_to: str = ""
    mail_host: str = ""
    mail_port: int = 587
    mail_ssl: bool = False
    mail_username: str = ""
    mail_password: str = ""
    page_max_bytes: int = DEFAULT_PAGE_MAX_BYTES
    scan_concurrency: int = 5
    request_timeout: float = 15.0
    cursor_path: str = "latest.json"
    api_base_url: str = "https://api.github.com"


def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> AppSettings:
    """Build settings from a JSON file, overridden by RELEASE_DIGEST_* env vars.

    The file may be absent when the environment (or a .env file) supplies
    every required value.
    """
    load_dotenv()

    raw: dict[str, Any] = {}
    settings_path = Path(path)
    if settings_path.exists():
        try:
            raw = json.loads(settings_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsError(f"Unable to read {settings_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise SettingsError(f"{settings_path} must contain a JSON object")

    values: dict[str, Any] = {}
    for field in fields(AppSettings):
        env_value = os.getenv(f"{ENV_PREFIX}{field.name.upper()}")
        value = env_value if env_value is not None else raw.get(field.name)
        if value is None:
            continue
        values[field.name] = _coerce(field.name, field.type, value)

    if not values.get("username"):
        raise SettingsError("username is required")
    if values.get("page_max_bytes", DEFAULT_PAGE_MAX_BYTES) <= 0:
        raise SettingsError("page_max_bytes must be positive")
    if values.get("scan_concurrency", 1) <= 0:
        raise SettingsError("scan_concurrency must be positive")
    return AppSettings(**values)


def _coerce(name: str, type_name: Any, value: Any) -> Any:
    type_name = getattr(type_name, "__name__", type_name)
    try:
        if type_name == "bool":
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in ("1", "true", "yes", "on")
        if type_name == "int":
            if isinstance(value, bool):
                raise ValueError("boolean is not an integer")
            return int(value)
        if type_name == "float":
            return float(value)
    except (TypeError, ValueError) as exc:
        raise SettingsError(f"Invalid value for {name}: {value!r}") from exc
    return str(value)
