from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from rich.console import Console
from rich.table import Table

from .cli.argument_parser import parse_args
from .config.config_loader import HOCON_EXAMPLE
from .config.vsphere_config import VsphereConfig
from .core.exceptions import Fatal, format_exception_for_cli
from .core.settings import HostSettings


def _host_settings(args: argparse.Namespace) -> Optional[HostSettings]:
    if args.confdir:
        return HostSettings(Path(args.confdir).expanduser())
    return None


def render(settings: Dict[str, Any], fmt: str, console: Console) -> None:
    if fmt == "json":
        console.print_json(json.dumps(settings, default=str))
        return
    if fmt == "yaml":
        console.print(yaml.safe_dump(settings, sort_keys=False, default_flow_style=False), end="", highlight=False, markup=False)
        return
    table = Table(title="vCenter connection settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Type", style="dim")
    for k, v in settings.items():
        table.add_row(k, "-" if v is None else str(v), type(v).__name__)
    console.print(table)


def run(args: argparse.Namespace, logger: logging.Logger, console: Optional[Console] = None) -> int:
    console = console or Console()
    if args.cmd == "example":
        console.print(HOCON_EXAMPLE, end="", highlight=False, markup=False)
        return 0
    if args.cmd == "path":
        hs = _host_settings(args) or HostSettings.detect()
        console.print(str(hs.config_file()), highlight=False, markup=False)
        return 0
    cfg = VsphereConfig(args.config, host_settings=_host_settings(args), logger=logger)
    logger.info(f"Resolved vCenter settings from {cfg.source}")
    settings = dict(cfg.resolved.to_dict(mask_password=True))
    settings["source"] = cfg.source
    render(settings, args.fmt, console)
    return 0


def main(argv=None) -> None:
    args, logger = parse_args(argv)
    try:
        rc = run(args, logger)
    except Fatal as e:
        # already logged once by U.fail
        logger.debug(format_exception_for_cli(e, verbose=2))
        rc = e.code
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C).")
        rc = 130
    sys.exit(int(rc))
if __name__ == "__main__":
    main()
