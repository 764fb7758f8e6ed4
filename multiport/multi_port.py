"""Multi-port server launcher.

Run: ``multi-port 3000 3001 3002`` or ``python -m multiport.multi_port --ports 3000,3001``.
"""
import argparse
import logging
import sys

from .config import DEFAULT_PORTS, LOG_LEVEL
from .errors import LauncherError
from .launcher import check_status, run_servers
from .logging_config import configure_logging
from .ports import parse_port_list, parse_positional_ports, unique_ports

LOG = logging.getLogger("multi_port")

EXAMPLES = """
Examples:
  multi-port                    # Use default ports
  multi-port 3000 3001 3002     # Use specific ports
  multi-port --ports 3000,3001  # Use comma-separated ports
  multi-port --default          # Explicitly use default ports
  multi-port --status 3000 3001 # Check which servers answer

Note: Each server instance runs independently with hot reloading enabled
unless APP_ENV=production.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multi-port",
        description="Multi-Port Server Launcher",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("ports", nargs="*", help="ports to start servers on")
    parser.add_argument("--ports", dest="ports_option", metavar="LIST",
                        help="comma-separated list of ports (e.g. --ports 3000,3001,3002)")
    parser.add_argument("--default", action="store_true",
                        help="use default ports (%s)" % ", ".join(str(p) for p in DEFAULT_PORTS))
    parser.add_argument("--status", action="store_true",
                        help="probe the selected ports instead of starting servers")
    return parser


def select_ports(use_default: bool, ports_option, positional) -> list:
    ports = []
    if use_default:
        ports = list(DEFAULT_PORTS)
    elif ports_option is not None:
        ports = parse_port_list(ports_option)
    else:
        ports = parse_positional_ports(positional)
    if not ports:
        ports = list(DEFAULT_PORTS)
    return unique_ports(ports)


def main(argv=None) -> int:
    args = build_parser().parse_intermixed_args(argv)
    configure_logging(LOG_LEVEL)
    ports = select_ports(args.default, args.ports_option, args.ports)
    try:
        if args.status:
            return check_status(ports)
        return run_servers(ports)
    except LauncherError as exc:
        LOG.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
