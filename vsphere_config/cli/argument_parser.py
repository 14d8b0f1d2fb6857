from __future__ import annotations
import argparse

from ..core.logger import c
from ..config.config_loader import HOCON_EXAMPLE
from .. import __version__

class CLI:
    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        epilog = (
            c("HOCON example:\n", "cyan", ["bold"]) +
            c(HOCON_EXAMPLE, "cyan") +
            "\n" +
            c("Resolution order:\n", "cyan", ["bold"]) +
            c(" • VCENTER_SERVER + VCENTER_USER + VCENTER_PASSWORD set: environment only\n", "cyan") +
            c(" • otherwise: --config file (default <confdir>/vsphere.conf), env vars still win per key\n", "cyan") +
            c(" • defaults: insecure=true, ssl=true, datacenter/port unset\n", "cyan")
        )
        p = argparse.ArgumentParser(
            prog="vsphere-config",
            description=c("vsphere-config: resolve vCenter credentials from env + HOCON", "green", ["bold"]),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=epilog,
        )
        p.add_argument("--config", default=None, help="HOCON config file (default: <confdir>/vsphere.conf).")
        p.add_argument("--confdir", default=None, help="Override the configuration directory (or set VSPHERE_CONFDIR).")
        p.add_argument("--version", action="version", version=__version__)
        p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv")
        p.add_argument("--log-file", default=None, help="Write logs to file.")
        sub = p.add_subparsers(dest="cmd", required=True)
        ps = sub.add_parser("show", help="Resolve and print settings (password masked)")
        ps.add_argument("--format", dest="fmt", choices=["table", "json", "yaml"], default="table", help="Output format.")
        sub.add_parser("path", help="Print the default config file path")
        sub.add_parser("example", help="Print an example HOCON config file")
        return p


def parse_args(argv=None, logger=None):
    """Returns: (args, logger)"""
    parser = CLI.build_parser()
    args = parser.parse_args(argv)
    if logger is None:
        from ..core.logger import Log  # local import to avoid cycles
        logger = Log.setup(args.verbose, args.log_file)
    return args, logger
