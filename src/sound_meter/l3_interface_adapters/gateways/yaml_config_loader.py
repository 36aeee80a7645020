"""Gateway: YAML meter settings — reads the user's config file into a raw dict."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import yaml

from sound_meter.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS


class YamlConfigLoader:
    """Finds and parses the settings file; validation happens in ``build_app_config``.

    An explicit path must exist. Without one, the first existing file in
    *search_paths* wins, and no file at all means "use the defaults".
    """

    def __init__(self, search_paths: Sequence[Path] | None = None) -> None:
        self._search_paths = list(DEFAULT_CONFIG_PATHS if search_paths is None else search_paths)

    def resolve(self, config_path: str | None = None) -> Path | None:
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            return path
        return next((p for p in self._search_paths if p.exists()), None)

    def load_raw(self, config_path: str | None = None, overrides: dict | None = None) -> dict:
        """Parsed YAML with *overrides* (CLI flags) merged on top."""
        path = self.resolve(config_path)
        data = {} if path is None else _read_mapping(path)
        if overrides:
            deep_merge(data, overrides)
        return data


def _read_mapping(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8'))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f'{path}: settings must be a YAML mapping, got {type(data).__name__}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
