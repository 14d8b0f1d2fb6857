# vsphere_config/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def _exit_code(x: Any) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return 1


def _one_line(s: str, limit: int = 600) -> str:
    s = " ".join((s or "").split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


@dataclass(eq=False)
class VsphereConfigError(Exception):
    """
    Root of every error this package raises.

    `msg` is the single line shown to users and logged once by U.fail.
    `context` carries the structured bits (config path, missing keys) and
    `cause` the parser or OS error behind an invalid file. Neither ever
    holds a password.
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self.msg = _one_line(self.msg)
        super().__init__(self.msg)

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        text = self.msg or type(self).__name__
        if include_context and self.context:
            text += " [" + ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items())) + "]"
        if include_cause and self.cause is not None:
            text += f" (cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})"
        return text

    def __str__(self) -> str:
        return self.user_message()


class Fatal(VsphereConfigError):
    """Ends the CLI run; main() exits with `code`."""


class ConfigError(Fatal):
    """
    Credentials could not be resolved.

    Every resolution failure is a ConfigError; the subclasses only tell the
    three causes apart for callers that care.
    """


class NoCredentialsError(ConfigError):
    pass


class MissingSettingsError(ConfigError):
    pass


class InvalidConfigFileError(ConfigError):
    pass


CONFIG_ERROR_CODE = 2

NO_CREDENTIALS_MSG = "You must provide credentials in either environment variables or a config file."
MISSING_SETTINGS_MSG = "To use this module you must provide the following settings:"


def no_credentials() -> NoCredentialsError:
    return NoCredentialsError(code=CONFIG_ERROR_CODE, msg=NO_CREDENTIALS_MSG)


def missing_settings(missing: List[str]) -> MissingSettingsError:
    msg = " ".join([MISSING_SETTINGS_MSG] + list(missing))
    return MissingSettingsError(code=CONFIG_ERROR_CODE, msg=msg, context={"missing": list(missing)})


def invalid_config_file(path: Any, reason: str, exc: Optional[BaseException] = None) -> InvalidConfigFileError:
    msg = f"Your configuration file at {path} is invalid. {reason}"
    return InvalidConfigFileError(code=CONFIG_ERROR_CODE, msg=msg, cause=exc, context={"path": str(path)})


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """Message for main(): -v adds context, -vv adds the cause."""
    if isinstance(e, VsphereConfigError):
        return e.user_message(include_context=verbose >= 1, include_cause=verbose >= 2)
    text = _one_line(str(e)) or type(e).__name__
    return f"{type(e).__name__}: {text}" if verbose >= 2 else text
