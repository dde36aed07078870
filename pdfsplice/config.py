"""Runtime settings for pdfsplice."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Any, Mapping

from .extract.scanner import DEFAULT_MARKER

__all__ = ["DEFAULT_USER_AGENT", "ENV_PREFIX", "Settings"]

ENV_PREFIX = "PDFSPLICE_"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; rv:91.0) Gecko/20100101 Firefox/91.0"


@dataclass(frozen=True, slots=True)
class Settings:
    """Locations, pacing and matching options used by a run."""

    index_url: str = "https://mp1.prepa-carnot.fr/programmes-de-colle/"
    secondary_url_template: str = "https://ccinp.mpsi1.fr/{numbers}.pdf"
    marker: str = DEFAULT_MARKER
    separator: str = ","
    request_delay: float = 3.0
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    output_dir: Path = Path(".")

    def __post_init__(self) -> None:
        if "{numbers}" not in self.secondary_url_template:
            raise ValueError("secondary_url_template must contain a '{numbers}' placeholder")
        try:
            self.secondary_url_template.format(numbers="1")
        except (AttributeError, IndexError, KeyError, ValueError) as exc:
            raise ValueError(f"secondary_url_template is not a valid template: {exc!r}") from exc
        if not self.marker:
            raise ValueError("marker must not be empty")
        if self.request_delay < 0:
            raise ValueError("request_delay must not be negative")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``PDFSPLICE_*`` environment variables."""

        source = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for item in fields(cls):
            raw = source.get(ENV_PREFIX + item.name.upper())
            if raw is None or raw == "":
                continue
            if item.name in ("request_delay", "timeout"):
                values[item.name] = float(raw)
            elif item.name == "output_dir":
                values[item.name] = Path(raw)
            else:
                values[item.name] = raw
        return cls(**values)

    def with_updates(self, **updates: Any) -> "Settings":
        return replace(self, **{key: value for key, value in updates.items() if value is not None})
