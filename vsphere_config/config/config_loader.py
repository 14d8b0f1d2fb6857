from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pyhocon import ConfigFactory, ConfigTree
from pyhocon.exceptions import ConfigException
from pyparsing import ParseBaseException

from ..core.exceptions import invalid_config_file
from ..core.utils import U
from .sources import ALL_KEYS, REQUIRED_KEYS, RawSource

SECTION = "vcenter"

HOCON_EXAMPLE = r"""# vsphere.conf (HOCON)
#
# Environment variables win over this file:
#   VCENTER_SERVER VCENTER_USER VCENTER_PASSWORD
#   VCENTER_DATACENTER VCENTER_INSECURE VCENTER_SSL VCENTER_PORT
#
# When all three required variables are set this file is not read at all.
vcenter: {
  host: "vcenter.example.com"
  user: "administrator@vsphere.local"
  password: "changeme"
  # Optional
  datacenter: "dc1"   # default: none
  insecure: false     # default: true (skip certificate verification)
  ssl: true           # default: true
  port: 443           # default: none (caller's transport default)
}
"""

_KEYS = "|".join(ALL_KEYS)
# `user:` / `vcenter.user =` / `"user":` with nothing but a comment after it
_BLANK_VALUE_RE = re.compile(
    rf'^\s*(?:{SECTION}\.)?"?(?P<key>{_KEYS})"?\s*[:=]\s*(?:(?:#|//).*)?$'
)
# a string value that is really the following `key:` line
_KEY_PREFIX_RE = re.compile(rf'^\s*"?(?:{_KEYS})"?\s*[:=]')


class Config:
    @staticmethod
    def blank_values(text: str) -> List[Tuple[int, str]]:
        """
        (line number, key) for every `key:` line left without a value.

        pyhocon reads such a value from the following line, so `user:` above
        `password: secret` would otherwise become the user name.
        """
        found = []
        for n, line in enumerate(text.splitlines(), start=1):
            m = _BLANK_VALUE_RE.match(line)
            if m:
                found.append((n, m.group("key")))
        return found

    @staticmethod
    def parse_text(logger: logging.Logger, text: str, origin: Union[str, Path]) -> Optional[RawSource]:
        """
        Parse HOCON text and map the `vcenter` object onto a RawSource.

        Returns None when the document has no (or a null) `vcenter` section.
        """
        blank = Config.blank_values(text)
        if blank:
            where = ", ".join(f"'{SECTION}.{k}' (line {n})" for n, k in blank)
            U.fail(logger, invalid_config_file(origin, f"These settings have no value: {where}"))
        try:
            tree = ConfigFactory.parse_string(text)
        except (ConfigException, ParseBaseException) as e:
            U.fail(logger, invalid_config_file(origin, f"The error from the parser is {e}", e))
        except OSError as e:
            U.fail(logger, invalid_config_file(origin, f"An included file could not be read: {e}", e))
        if not isinstance(tree, ConfigTree):
            U.fail(logger, invalid_config_file(
                origin, f"The document must be an object, got {U.type_name(tree)}"))
        section = tree.get(SECTION, None)
        if section is None:
            logger.debug(f"No '{SECTION}' section in {origin}")
            return None
        if not isinstance(section, ConfigTree):
            U.fail(logger, invalid_config_file(
                origin, f"'{SECTION}' must be an object, got {U.type_name(section)}"))
        values: Dict[str, Any] = {}
        for key in ALL_KEYS:
            if key not in section:
                continue
            val = section.get(key)
            if key in REQUIRED_KEYS:
                if not isinstance(val, str):
                    U.fail(logger, invalid_config_file(
                        origin, f"'{SECTION}.{key}' must be a string, got {U.type_name(val)}"))
            elif isinstance(val, (ConfigTree, dict, list)):
                U.fail(logger, invalid_config_file(
                    origin, f"'{SECTION}.{key}' must be a scalar, got {U.type_name(val)}"))
            if isinstance(val, str) and _KEY_PREFIX_RE.match(val):
                # never echo the value: it may hold the next line's password
                U.fail(logger, invalid_config_file(
                    origin, f"'{SECTION}.{key}' has no value of its own"))
            if val is not None:
                values[key] = val
        unknown = sorted(k for k in section.keys() if k not in ALL_KEYS)
        if unknown:
            logger.warning(f"Ignoring unknown keys in {origin}: {', '.join(unknown)}")
        src = RawSource(origin=str(origin), **values)
        logger.debug(f"Loaded config {origin}: supplied={src.supplied()}")
        return src

    @staticmethod
    def load_one(logger: logging.Logger, path: Union[str, Path]) -> Optional[RawSource]:
        """
        Read one config file. A path that is not an existing regular file is
        skipped (None); anything unreadable or unparsable is fatal.
        """
        p = Path(path).expanduser()
        if not p.is_file():
            logger.debug(f"Config not found: {p}")
            return None
        try:
            text = p.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            U.fail(logger, invalid_config_file(p, f"It could not be read: {e}", e))
        return Config.parse_text(logger, text, p)
