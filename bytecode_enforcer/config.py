"""Rule configuration — defaults, environment variables and host option names."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from bytecode_enforcer.classfile import JAVA_7
from bytecode_enforcer.models import SCOPE_PROVIDED, SCOPE_TEST

_ENV_PREFIX = "BYTECODE_ENFORCER_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

# camelCase option name (as bound by a build host) -> RuleConfig field
_OPTION_NAMES: dict[str, str] = {
    "supportedJvmByteCodeLevel": "supported_jvm_bytecode_level",
    "excludeScopeTest": "exclude_scope_test",
    "excludeScopeProvided": "exclude_scope_provided",
}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_level(name: str, value: Any) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if level < 0:
        raise ValueError(f"{name} must be non-negative, got {level}")
    return level


@dataclass(frozen=True)
class RuleConfig:
    """Options recognised by the bytecode level rule."""

    supported_jvm_bytecode_level: int = JAVA_7
    exclude_scope_test: bool = True
    exclude_scope_provided: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RuleConfig:
        """Build a config from ``BYTECODE_ENFORCER_*`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field_name in _OPTION_NAMES.values():
            key = _ENV_PREFIX + field_name.upper()
            if key in env:
                values[field_name] = env[key]
        return cls().with_overrides(**values)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> RuleConfig:
        """Build a config from host option names (``supportedJvmByteCodeLevel`` ...).

        Unknown keys raise ``ValueError``.
        """
        values: dict[str, Any] = {}
        for key, value in options.items():
            field_name = _OPTION_NAMES.get(key)
            if field_name is None:
                raise ValueError(f"unknown option {key!r}")
            values[field_name] = value
        return cls().with_overrides(**values)

    def with_overrides(self, **overrides: Any) -> RuleConfig:
        """Return a copy with the non-None *overrides* applied and validated."""
        values: dict[str, Any] = {}
        for name, value in overrides.items():
            if value is None:
                continue
            if name == "supported_jvm_bytecode_level":
                values[name] = _parse_level(name, value)
            elif name in ("exclude_scope_test", "exclude_scope_provided"):
                values[name] = _parse_bool(name, value)
            else:
                raise ValueError(f"unknown option {name!r}")
        return replace(self, **values)

    def is_excluded_scope(self, scope: str | None) -> bool:
        """True when nodes of *scope* are pruned from the walk."""
        return (self.exclude_scope_test and scope == SCOPE_TEST) or (
            self.exclude_scope_provided and scope == SCOPE_PROVIDED
        )
