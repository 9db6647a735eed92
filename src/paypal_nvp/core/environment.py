"""
Layered lookup of the ``PAYPAL_*`` settings.

Three layers are consulted, lowest precedence first: the process
environment (or an explicit ``base``), an optional ``.env`` file that only
fills gaps, and explicit overrides. The result feeds
:meth:`paypal_nvp.core.config.PayPalConfig.from_mapping`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Mapping, MutableMapping, Optional, Tuple

__all__ = [
    "ENV_PREFIX",
    "PayPalEnvironment",
    "build_environment",
    "load_env_file",
    "parse_env_text",
]

ENV_PREFIX = "PAYPAL_"


def _assignments(text: str) -> Iterator[Tuple[str, str]]:
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        name, sep, value = line.partition("=")
        name = name.strip()
        if not sep or not name or name.startswith("#"):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        yield name, value


def parse_env_text(text: str) -> Dict[str, str]:
    """``KEY=VALUE`` lines to a dict; comments, blanks and stray lines are skipped."""
    return dict(_assignments(text))


def _read_env_file(path: Optional[str]) -> Dict[str, str]:
    if path is None:
        return {}
    env_path = Path(path)
    if not env_path.is_file():
        return {}
    return parse_env_text(env_path.read_text(encoding="utf-8"))


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy variables from ``path`` into ``environ`` (``os.environ`` by default)
    without replacing keys that are already set, and return the result.
    """
    target = os.environ if environ is None else environ
    for name, value in _read_env_file(path).items():
        if name not in target:
            target[name] = value
    return dict(target)


@dataclass(frozen=True)
class PayPalEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def settings(self) -> Dict[str, str]:
        """Only the ``PAYPAL_*`` entries."""
        return {
            name: value
            for name, value in self.variables.items()
            if name.startswith(ENV_PREFIX)
        }


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> PayPalEnvironment:
    """
    Resolve the three layers into a :class:`PayPalEnvironment`.

    Pass ``env_file=None`` to skip the file layer.
    """
    process = os.environ if base is None else base
    resolved = {**_read_env_file(env_file), **process, **(overrides or {})}
    return PayPalEnvironment(variables=resolved)
