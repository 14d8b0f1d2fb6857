from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

CONFIG_FILE_NAME = "vsphere.conf"
CONFDIR_ENV = "VSPHERE_CONFDIR"

SYSTEM_CONFDIR = Path("/etc/vsphere")
USER_CONFDIR = Path("~/.config/vsphere")


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


@dataclass(frozen=True)
class HostSettings:
    """
    Host-side conventions the resolver depends on.

    confdir:
      - $VSPHERE_CONFDIR when set
      - /etc/vsphere when running as root
      - ~/.config/vsphere otherwise
    """
    confdir: Path

    @classmethod
    def detect(cls, env: Optional[Mapping[str, str]] = None) -> "HostSettings":
        env = os.environ if env is None else env
        override = (env.get(CONFDIR_ENV) or "").strip()
        if override:
            return cls(Path(override).expanduser())
        if _is_root():
            return cls(SYSTEM_CONFDIR)
        return cls(USER_CONFDIR.expanduser())

    def config_file(self, name: str = CONFIG_FILE_NAME) -> Path:
        # pure path arithmetic: no stat, no mkdir
        return Path(self.confdir) / name
