# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..core.exceptions import CONFIG_ERROR_CODE, ConfigError, missing_settings, no_credentials
from ..core.logger import get_logger
from ..core.settings import HostSettings
from ..core.utils import U
from .config_loader import Config
from .sources import RawSource, read_env, required_env_present

DEFAULT_INSECURE = True
DEFAULT_SSL = True


@dataclass(frozen=True)
class ResolvedConfig:
    """
    Final vCenter connection settings.

    insecure/ssl/port keep the type of the source they came from: raw strings
    from the environment, parser-native values from the config file. Use
    connection_kwargs() for normalized values.
    """
    host: str
    user: str
    password: str = field(repr=False)
    datacenter: Optional[str] = None
    insecure: Any = DEFAULT_INSECURE
    ssl: Any = DEFAULT_SSL
    port: Any = None

    @classmethod
    def from_source(cls, src: RawSource) -> "ResolvedConfig":
        return cls(
            host=src.host,
            user=src.user,
            password=src.password,
            datacenter=src.datacenter,
            insecure=DEFAULT_INSECURE if src.insecure is None else src.insecure,
            ssl=DEFAULT_SSL if src.ssl is None else src.ssl,
            port=src.port,
        )

    def to_dict(self, *, mask_password: bool = True) -> Dict[str, Any]:
        return {
            "host": self.host,
            "user": self.user,
            "password": U.mask(self.password) if mask_password else self.password,
            "datacenter": self.datacenter,
            "insecure": self.insecure,
            "ssl": self.ssl,
            "port": self.port,
        }

    def connection_kwargs(self) -> Dict[str, Any]:
        """
        Normalized values for a vSphere client: booleans for insecure/ssl,
        int (or None) for port. Unparsable flags fall back to their defaults.
        """
        port = U.to_int(self.port)
        if self.port is not None and port is None:
            raise ConfigError(code=CONFIG_ERROR_CODE, msg=f"Invalid port value: {self.port!r}", context={"port": self.port})
        return {
            "host": self.host,
            "user": self.user,
            "password": self.password,
            "port": port,
            "insecure": U.to_bool(self.insecure, DEFAULT_INSECURE),
            "ssl": U.to_bool(self.ssl, DEFAULT_SSL),
        }


class VsphereConfig:
    """
    Resolve vCenter credentials once, at construction.

    Priority:
      - all of VCENTER_SERVER / VCENTER_USER / VCENTER_PASSWORD set:
        environment only (optional VCENTER_* too), config file never read
      - otherwise: config file (explicit path or <confdir>/vsphere.conf),
        with any VCENTER_* variable that is set still winning per key

    Failures raise a ConfigError subclass:
      - NoCredentialsError: nothing in the environment and no `vcenter` section
      - MissingSettingsError: host/user/password still missing after both sources
      - InvalidConfigFileError: file unreadable, unparsable or badly typed
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        *,
        env: Optional[Mapping[str, str]] = None,
        host_settings: Optional[HostSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or get_logger("resolver")
        self._env = os.environ if env is None else env
        self._host_settings = host_settings
        self.config_file = Path(config_file).expanduser() if config_file else None
        self.source = ""
        self._resolved = self._resolve()

    def default_config_file(self) -> Path:
        if self._host_settings is None:
            self._host_settings = HostSettings.detect(self._env)
        return self._host_settings.config_file()

    def _resolve(self) -> ResolvedConfig:
        if required_env_present(self._env):
            self.source = "env"
            self.logger.debug("Using vCenter credentials from environment")
            return ResolvedConfig.from_source(read_env(self._env))

        env_src = read_env(self._env)
        path = self.config_file or self.default_config_file()
        file_src = Config.load_one(self.logger, path)

        if file_src is None:
            if not env_src.present_required():
                U.fail(self.logger, no_credentials())
            merged = env_src
            self.source = "env"
        elif env_src.supplied():
            merged = file_src.overlay(env_src)
            self.source = "env+file"
        else:
            merged = file_src
            self.source = "file"

        missing = merged.missing_required()
        if missing:
            U.fail(self.logger, missing_settings(missing))

        self.logger.debug(f"Using vCenter credentials from {self.source} ({path})")
        return ResolvedConfig.from_source(merged)

    @property
    def resolved(self) -> ResolvedConfig:
        return self._resolved

    @property
    def host(self) -> str:
        return self._resolved.host

    @property
    def user(self) -> str:
        return self._resolved.user

    @property
    def password(self) -> str:
        return self._resolved.password

    @property
    def datacenter(self) -> Optional[str]:
        return self._resolved.datacenter

    @property
    def insecure(self) -> Any:
        return self._resolved.insecure

    @property
    def ssl(self) -> Any:
        return self._resolved.ssl

    @property
    def port(self) -> Any:
        return self._resolved.port

    def __repr__(self) -> str:
        return f"VsphereConfig(source={self.source!r}, {self._resolved!r})"
