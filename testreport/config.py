"""Report builder configuration file management.

Reads and writes a small JSON file controlling how the builder names the
synthetic trailing package and how it treats unresolved end events.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "fallback_package_name": "unknown",
    "strict": False,
}


class BuilderConfig:
    """Manages the report builder JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    def save(self) -> None:
        """Write config to the file."""
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def fallback_package_name(self) -> str:
        """Get the name used for the package flushed implicitly by build()."""
        val = self._data.get(
            "fallback_package_name", DEFAULT_CONFIG["fallback_package_name"],
        )
        return str(val) if val else DEFAULT_CONFIG["fallback_package_name"]

    @property
    def strict(self) -> bool:
        """Whether unresolved end events raise instead of being recorded."""
        return bool(self._data.get("strict", DEFAULT_CONFIG["strict"]))

    def set_config(
        self,
        fallback_package_name: str | None = None,
        strict: bool | None = None,
    ) -> None:
        """Update configuration values."""
        if fallback_package_name is not None:
            self._data["fallback_package_name"] = fallback_package_name
        if strict is not None:
            self._data["strict"] = strict
