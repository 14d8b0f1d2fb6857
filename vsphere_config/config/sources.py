from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

REQUIRED_KEYS: Tuple[str, ...] = ("host", "user", "password")
OPTIONAL_KEYS: Tuple[str, ...] = ("datacenter", "insecure", "ssl", "port")
ALL_KEYS: Tuple[str, ...] = REQUIRED_KEYS + OPTIONAL_KEYS

# logical key -> environment variable
ENV_VARS: Dict[str, str] = {
    "host": "VCENTER_SERVER",
    "user": "VCENTER_USER",
    "password": "VCENTER_PASSWORD",
    "datacenter": "VCENTER_DATACENTER",
    "insecure": "VCENTER_INSECURE",
    "ssl": "VCENTER_SSL",
    "port": "VCENTER_PORT",
}


@dataclass(frozen=True)
class RawSource:
    """
    One source of settings (environment or config file), before defaults.

    None means "not supplied". Environment values are always strings; file
    values keep whatever scalar type the HOCON parser produced.
    """
    origin: str = ""
    host: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    datacenter: Optional[str] = None
    insecure: Optional[Any] = None
    ssl: Optional[Any] = None
    port: Optional[Any] = None

    def __repr__(self) -> str:
        shown = ", ".join(
            f"{k}={'<set>' if k == 'password' else getattr(self, k)!r}"
            for k in ALL_KEYS
            if getattr(self, k) is not None
        )
        return f"RawSource(origin={self.origin!r}, {shown})"

    def present_required(self) -> List[str]:
        return [k for k in REQUIRED_KEYS if getattr(self, k) is not None]

    def missing_required(self) -> List[str]:
        return [k for k in REQUIRED_KEYS if getattr(self, k) is None]

    def supplied(self) -> List[str]:
        return [k for k in ALL_KEYS if getattr(self, k) is not None]

    def overlay(self, other: "RawSource") -> "RawSource":
        """Return a copy where every key set on `other` wins over ours."""
        changes = {f.name: getattr(other, f.name) for f in fields(other)
                   if f.name != "origin" and getattr(other, f.name) is not None}
        return replace(self, origin=f"{self.origin}+{other.origin}", **changes)


def required_env_present(env: Mapping[str, str]) -> bool:
    return all(ENV_VARS[k] in env for k in REQUIRED_KEYS)


def read_env(env: Mapping[str, str], keys: Tuple[str, ...] = ALL_KEYS) -> RawSource:
    """
    Snapshot the VCENTER_* variables.

    A variable counts as supplied when it is set at all, even to "". Values are
    passed through untouched.
    """
    values: Dict[str, Any] = {}
    for key in keys:
        var = ENV_VARS[key]
        if var in env:
            values[key] = env[var]
    return RawSource(origin="env", **values)
