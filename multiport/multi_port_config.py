"""Multi-port server launcher driven by ``ports.config.json`` profiles.

Run: ``multi-port-config --profile testing`` or ``multi-port-config --list``.
"""
from pathlib import Path
import argparse
import logging
import sys

from .config import DEFAULT_PORTS, LOG_LEVEL, PORTS_CONFIG
from .errors import LauncherError, UnknownProfileError
from .launcher import check_status, run_servers
from .logging_config import configure_logging
from .ports import format_ports, parse_port_list, parse_positional_ports, unique_ports
from .profiles import default_ports, format_profile_list, get_profile, load_port_config, profile_ports

LOG = logging.getLogger("multi_port_config")

HELP_FALLBACKS = {
    "development": [3000, 3001, 3002, 3003],
    "testing": [4000, 4001, 4002],
    "staging": [5000, 5001],
}


def _epilog(config) -> str:
    def ports_of(name):
        return format_ports(profile_ports(config, name, HELP_FALLBACKS[name]), sep=",")

    return f"""
Profiles:
  development         Default development servers (ports: {ports_of("development")})
  testing             Testing servers (ports: {ports_of("testing")})
  staging             Staging servers (ports: {ports_of("staging")})

Examples:
  multi-port-config                    # Use development profile
  multi-port-config --profile testing  # Use testing profile
  multi-port-config 3000 3001 3002     # Use specific ports
  multi-port-config --ports 3000,3001  # Use comma-separated ports
  multi-port-config --list             # List available profiles

Note: Each server instance runs independently with hot reloading enabled
unless APP_ENV=production.
"""


def build_parser(config=None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multi-port-config",
        description="Multi-Port Server Launcher (config-based)",
        epilog=_epilog(config or {}),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("ports", nargs="*", help="ports to start servers on")
    parser.add_argument("-l", "--list", action="store_true", help="list available profiles")
    parser.add_argument("--profile", metavar="NAME", help="use a profile from the config file")
    parser.add_argument("--ports", dest="ports_option", metavar="LIST",
                        help="comma-separated list of ports (e.g. --ports 3000,3001,3002)")
    parser.add_argument("--config", default=PORTS_CONFIG, metavar="PATH",
                        help="profile file (default: %(default)s)")
    parser.add_argument("--status", action="store_true",
                        help="probe the selected ports instead of starting servers")
    return parser


def resolve_ports(config, profile=None, ports_option=None, positional=(), source=PORTS_CONFIG):
    """Pick the ports to launch, from the most to the least specific input."""
    ports = []
    if profile is not None:
        found = get_profile(config, profile)
        if found is None:
            raise UnknownProfileError(profile, Path(source).name)
        ports = found.ports
        LOG.info("Using profile: %s", found.name)
        if found.description:
            LOG.info("%s", found.description)
    elif ports_option is not None:
        ports = parse_port_list(ports_option)
    else:
        ports = parse_positional_ports(positional)

    if not ports:
        development = get_profile(config, "development")
        if development is not None:
            ports = development.ports
            LOG.info("Using development profile (default)")
        else:
            ports = default_ports(config) or list(DEFAULT_PORTS)
            LOG.info("Using default ports")
    return unique_ports(ports)


def _config_path(argv) -> str:
    # the help text needs the file before the full parse
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=PORTS_CONFIG)
    known, _ = pre.parse_known_args(argv)
    return known.config


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    configure_logging(LOG_LEVEL)
    path = _config_path(argv)
    config = load_port_config(path)
    args = build_parser(config).parse_intermixed_args(argv)

    if args.list:
        print(format_profile_list(config))
        return 0

    try:
        ports = resolve_ports(config, args.profile, args.ports_option, args.ports, source=path)
        if args.status:
            return check_status(ports)
        return run_servers(ports)
    except LauncherError as exc:
        LOG.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
