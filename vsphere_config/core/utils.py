from __future__ import annotations
import logging
from typing import Any, Optional, Type

from .exceptions import VsphereConfigError

_TRUE = {"1", "true", "yes", "on", "y"}
_FALSE = {"0", "false", "no", "off", "n"}

class U:
    @staticmethod
    def fail(logger: logging.Logger, err: VsphereConfigError) -> None:
        """Log a prepared project error once and raise it."""
        logger.error(str(err))
        raise err
    @staticmethod
    def mask(secret: Optional[str]) -> str:
        if not secret:
            return ""
        return "*" * 8
    @staticmethod
    def to_bool(value: Any, default: bool = True) -> bool:
        """
        Interpret env-style flags. Native booleans pass through; unknown
        strings fall back to `default`.
        """
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        s = str(value).strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
        return default
    @staticmethod
    def to_int(value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(str(value).strip())
        except ValueError:
            return None
    @staticmethod
    def type_name(value: Any) -> str:
        if value is None:
            return "null"
        t: Type[Any] = type(value)
        return t.__name__
