"""Layered configuration resolution."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import DataDropConfig

ENV_PREFIX = "DATADROP__"


def resolve_with_precedence(
    *,
    defaults: DataDropConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> DataDropConfig:
    """Merge override layers onto the defaults and validate the result.

    Later layers win: file, then environment, then CLI. Keys may be nested
    mappings or dotted paths such as ``parsing.hash_algorithm``.

    Raises:
        ConfigError: If a layer is malformed or the merged values are invalid.
    """
    merged = defaults.model_dump(mode="python")
    layers = (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    )
    for label, layer in layers:
        if layer is None:
            continue
        merged = _merge(merged, _expand_dotted(layer, label=label))

    try:
        return DataDropConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: DataDropConfig) -> Dict[str, str]:
    """Render the config as ``DATADROP__SECTION__KEY`` environment variables."""
    flat: Dict[str, str] = {}

    def _walk(path: list[str], value: Any) -> None:
        if isinstance(value, dict):
            for key, child in value.items():
                _walk([*path, str(key)], child)
            return
        name = ENV_PREFIX + "__".join(part.upper() for part in path)
        if value is None:
            flat[name] = "null"
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        elif isinstance(value, list):
            flat[name] = yaml.safe_dump(value, default_flow_style=True).strip()
        else:
            flat[name] = str(value)

    _walk([], config.model_dump(mode="python"))
    return flat


def _expand_dotted(layer: Mapping[str, Any], *, label: str) -> dict[str, Any]:
    if not isinstance(layer, MappingABC):
        raise ConfigError(f"{label.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in layer.items():
        if not isinstance(key, str):
            raise ConfigError(f"{label.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand_dotted(value, label=label)
        segments = key.split(".")
        node = expanded
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{label.capitalize()} override for {key} conflicts with an existing value."
                )
            node = child
        leaf = segments[-1]
        if isinstance(value, dict) and isinstance(node.get(leaf), dict):
            node[leaf] = _merge(node[leaf], value)
        else:
            node[leaf] = value
    return expanded


def _merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "resolve_with_precedence", "flatten_for_env"]
