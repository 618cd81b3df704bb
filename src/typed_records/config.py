"""Configuration for record stores.

Settings come from keyword arguments, the environment, or a shell-style
config file of ``KEY=value`` lines::

    # where, under the struct dir, type definitions and data are kept
    STRUCT_TYPEDIR=typedefs
    STRUCT_DATADIR=data
    _VERBOSE_=yes
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from typed_records.errors import InvalidNameError
from typed_records.types import is_identifier

TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
FALSE_WORDS = frozenset({"false", "no", "off", "0", ""})

# setting name -> config file / environment key
ENV_KEYS = {
    "struct_dir": "TYPED_RECORDS_DIR",
    "typedir": "STRUCT_TYPEDIR",
    "datadir": "STRUCT_DATADIR",
    "keep": "TYPED_RECORDS_KEEP",
    "verbose": "_VERBOSE_",
    "debug": "_DEBUG_",
}


def parse_bool(text: str, key: str = "value") -> bool:
    """Parse true|yes|on|1 or false|no|off|0 (case-insensitive; empty is false)."""
    word = text.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"{key}: expected true|yes|on|1 or false|no|off|0, got '{text}'")


@dataclass(frozen=True)
class StructConfig:
    """Settings for a StructStore.

    Attributes:
        struct_dir: Base directory for the session; None allocates a
            temporary directory.
        typedir: Subdirectory holding type definitions.
        datadir: Subdirectory holding instance data.
        keep: Keep a temporary session directory after close.
        verbose: Log at INFO level.
        debug: Log at DEBUG level (implies verbose).
    """

    struct_dir: Path | None = None
    typedir: str = "typedefs"
    datadir: str = "data"
    keep: bool = False
    verbose: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        for attr in ("typedir", "datadir"):
            value = getattr(self, attr)
            if not is_identifier(value):
                raise InvalidNameError(f"Invalid {attr} '{value}'", name=str(value))
        if self.struct_dir is not None and not isinstance(self.struct_dir, Path):
            object.__setattr__(self, "struct_dir", Path(self.struct_dir))

    def with_settings(self, settings: Mapping[str, str]) -> StructConfig:
        """Return a copy overridden by raw KEY -> text settings.

        Keys not used by StructConfig are ignored.
        """
        changes: dict[str, object] = {}
        for attr, key in ENV_KEYS.items():
            if key not in settings:
                continue
            text = settings[key]
            if attr == "struct_dir":
                changes[attr] = Path(text).expanduser() if text else None
            elif attr in ("typedir", "datadir"):
                changes[attr] = text
            else:
                changes[attr] = parse_bool(text, key)
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StructConfig:
        """Build a config from environment variables."""
        return cls().with_settings(os.environ if environ is None else environ)

    @classmethod
    def from_file(cls, path: Path | str, base: StructConfig | None = None) -> StructConfig:
        """Build a config from a shell-style KEY=value file.

        Blank lines and ``#`` comments are skipped; values are unquoted as
        the shell would.
        """
        settings: dict[str, str] = {}
        with open(path, encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                words = shlex.split(line, comments=True)
                if not words:
                    continue
                key, sep, value = words[0].partition("=")
                if not sep or len(words) > 1:
                    raise ValueError(f"{path}:{lineno}: expected KEY=value, got {line.strip()!r}")
                settings[key] = value
        return (base or cls()).with_settings(settings)
