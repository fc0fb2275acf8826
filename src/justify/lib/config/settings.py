"""Project-level configuration loader."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import cast

from justify.lib.values import DEFAULT_RENDER_LIMIT

logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path(".justify") / "config.toml"


@dataclass(frozen=True, slots=True)
class JustifyConfig:
    """Resolved configuration for a batch."""

    render_limit: int = DEFAULT_RENDER_LIMIT
    equalize_strings: bool = False


_SECTION_KEY_MAP: dict[str, dict[str, str]] = {
    "render": {
        "limit": "render_limit",
        "render_limit": "render_limit",
    },
    "columns": {
        "equalize_strings": "equalize_strings",
    },
}

_TOP_LEVEL_KEY_MAP: dict[str, str] = {
    "render_limit": "render_limit",
    "equalize_strings": "equalize_strings",
}

_ENV_OVERRIDE_MAP: dict[str, str] = {
    "JUSTIFY_RENDER_LIMIT": "render_limit",
    "JUSTIFY_EQUALIZE_STRINGS": "equalize_strings",
}

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def _expected_type_name(field_name: str) -> str:
    if field_name == "render_limit":
        return "int"
    return "bool"


def _coerce_file_value(*, field_name: str, raw_value: object, source: str) -> object:
    expected = _expected_type_name(field_name)
    if expected == "int":
        if isinstance(raw_value, bool) or not isinstance(raw_value, int):
            raise ValueError(
                f"Invalid value for '{source}': expected int, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        if raw_value < 1:
            raise ValueError(f"Invalid value for '{source}': expected a positive int.")
        return raw_value

    if not isinstance(raw_value, bool):
        raise ValueError(
            f"Invalid value for '{source}': expected bool, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    return raw_value


def _coerce_env_value(*, field_name: str, raw_value: str, env_name: str) -> object:
    expected = _expected_type_name(field_name)
    normalized = raw_value.strip().lower()
    if expected == "int":
        try:
            parsed = int(normalized)
        except ValueError as error:
            raise ValueError(
                f"Invalid environment override '{env_name}': expected int, got {raw_value!r}."
            ) from error
        if parsed < 1:
            raise ValueError(
                f"Invalid environment override '{env_name}': expected a positive int."
            )
        return parsed

    if normalized in _TRUE_WORDS:
        return True
    if normalized in _FALSE_WORDS:
        return False
    raise ValueError(
        f"Invalid environment override '{env_name}': expected bool, got {raw_value!r}."
    )


def _default_values() -> dict[str, object]:
    defaults = JustifyConfig()
    return {field.name: getattr(defaults, field.name) for field in fields(JustifyConfig)}


def _apply_toml_payload(
    *,
    values: dict[str, object],
    payload: dict[str, object],
    path: Path,
) -> None:
    for key, raw_value in payload.items():
        section_map = _SECTION_KEY_MAP.get(key)
        if section_map is not None:
            if not isinstance(raw_value, dict):
                raise ValueError(f"Invalid value for '{key}' in '{path}': expected table.")
            for section_key, section_value in cast("dict[str, object]", raw_value).items():
                field_name = section_map.get(section_key)
                if field_name is None:
                    logger.warning(
                        "Ignoring unknown justify config key '%s.%s'.",
                        key,
                        section_key,
                    )
                    continue
                values[field_name] = _coerce_file_value(
                    field_name=field_name,
                    raw_value=section_value,
                    source=f"{key}.{section_key}",
                )
            continue

        field_name = _TOP_LEVEL_KEY_MAP.get(key)
        if field_name is None:
            logger.warning("Ignoring unknown justify config key '%s'.", key)
            continue
        values[field_name] = _coerce_file_value(
            field_name=field_name,
            raw_value=raw_value,
            source=key,
        )


def _apply_env_overrides(values: dict[str, object]) -> None:
    for env_name, field_name in _ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        values[field_name] = _coerce_env_value(
            field_name=field_name,
            raw_value=raw_value,
            env_name=env_name,
        )


def load_config(root: Path) -> JustifyConfig:
    """Load `.justify/config.toml` under `root` and apply environment overrides."""

    values = _default_values()
    path = root / CONFIG_RELATIVE_PATH
    if path.is_file():
        payload_obj = tomllib.loads(path.read_text(encoding="utf-8"))
        payload = cast("dict[str, object]", payload_obj)
        _apply_toml_payload(values=values, payload=payload, path=path)

    _apply_env_overrides(values)
    return JustifyConfig(
        render_limit=cast("int", values["render_limit"]),
        equalize_strings=cast("bool", values["equalize_strings"]),
    )
