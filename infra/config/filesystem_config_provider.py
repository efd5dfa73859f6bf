from __future__ import annotations

import json
import string
from dataclasses import fields
from pathlib import Path
from typing import Any

from domain.models import AppConfig, CaptureOptions

_TOP_LEVEL_KEYS = {"destination", "headless", "resolutions_url", "viewports_url", "defaults"}
_OPTION_TYPES: dict[str, tuple[type, ...]] = {
    "delay": (int, float),
    "timeout": (int, float),
    "crop": (bool,),
    "css": (str,),
    "cookies": (list,),
    "filename": (str,),
    "selector": (str,),
    "hide": (list,),
    "username": (str,),
    "password": (str,),
    "scale": (int, float),
    "format": (str,),
    "user_agent": (str,),
    "headers": (dict,),
}
_SUPPORTED_FORMATS = {"png", "jpg", "jpeg"}
_TEMPLATE_FIELDS = {"url", "size", "width", "height", "crop", "date", "time"}


class FileSystemConfigProvider:
    """Reads config.json from a config directory.

    Every public method re-reads from disk so that edits
    to the JSON file take effect without restarting the app.
    A missing config.json means built-in defaults.
    """

    def __init__(self, config_dir: str) -> None:
        self._config_dir = Path(config_dir)

    @property
    def config_path(self) -> Path:
        return self._config_dir / "config.json"

    def validate(self) -> list[str]:
        errors: list[str] = []
        data = self._validate_json_file(self.config_path, errors)
        if data is None:
            return errors

        unknown = set(data) - _TOP_LEVEL_KEYS
        if unknown:
            errors.append(f"config.json has unknown keys: {', '.join(sorted(unknown))}")

        headless = data.get("headless")
        if headless is not None and not isinstance(headless, bool):
            errors.append("headless must be a boolean (true/false), not a string.")

        for key in ("destination", "resolutions_url", "viewports_url"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                errors.append(f"{key} must be a string.")

        defaults = data.get("defaults", {})
        if not isinstance(defaults, dict):
            errors.append("defaults must be an object.")
        else:
            errors.extend(self._validate_options(defaults))
        return errors

    @staticmethod
    def _validate_options(data: dict[str, Any]) -> list[str]:
        errors: list[str] = []
        unknown = set(data) - set(_OPTION_TYPES)
        if unknown:
            errors.append(f"defaults has unknown options: {', '.join(sorted(unknown))}")

        for key, types in _OPTION_TYPES.items():
            value = data.get(key)
            if value is None:
                continue
            # bool is an int subclass; only "crop" accepts it.
            if not isinstance(value, types) or (isinstance(value, bool) and bool not in types):
                expected = " or ".join(t.__name__ for t in types)
                errors.append(f"defaults.{key} must be of type {expected}.")

        fmt = data.get("format")
        if isinstance(fmt, str) and fmt.lower() not in _SUPPORTED_FORMATS:
            errors.append(f"defaults.format '{fmt}' is not supported (use png or jpg).")

        template = data.get("filename")
        if isinstance(template, str):
            try:
                names = {name for _, name, _, _ in string.Formatter().parse(template) if name}
            except ValueError as exc:
                errors.append(f"defaults.filename is not a valid template: {exc}")
            else:
                bad = names - _TEMPLATE_FIELDS
                if bad:
                    errors.append(
                        f"defaults.filename uses unknown fields: {', '.join(sorted(bad))}",
                    )

        headers = data.get("headers")
        if isinstance(headers, dict) and not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            errors.append("defaults.headers must map strings to strings.")
        return errors

    def get_config(self) -> AppConfig:
        data = self._read_json()
        base = AppConfig()
        return AppConfig(
            destination=data.get("destination"),
            headless=bool(data.get("headless", base.headless)),
            resolutions_url=data.get("resolutions_url") or base.resolutions_url,
            viewports_url=data.get("viewports_url"),
            defaults=self.options_from_dict(data.get("defaults", {})),
        )

    @staticmethod
    def options_from_dict(data: dict[str, Any]) -> CaptureOptions:
        known = {item.name for item in fields(CaptureOptions)}
        values = {key: value for key, value in data.items() if key in known and value is not None}
        values["headers"] = dict(values.get("headers") or {})
        return CaptureOptions(**values)

    # -- internal helpers ---------------------------------------------------

    def _read_json(self) -> dict[str, Any]:
        if not self.config_path.is_file():
            return {}
        return json.loads(self.config_path.read_text(encoding="utf-8"))

    @staticmethod
    def _validate_json_file(path: Path, errors: list[str]) -> dict[str, Any] | None:
        """Validate the JSON file parses to an object.

        Returns the parsed dict on success (an empty one when the file
        does not exist), or None if it is unreadable.
        """
        if not path.is_file():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            errors.append(f"Cannot read {path}: {exc}")
            return None
        if not isinstance(data, dict):
            errors.append(f"{path.name} must contain a JSON object.")
            return None
        return data
