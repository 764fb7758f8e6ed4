"""Port argument parsing shared by the launcher commands."""
from typing import Iterable, List, Optional
import logging

LOG = logging.getLogger("ports")

MIN_PORT = 1
MAX_PORT = 65535


def parse_port(text) -> Optional[int]:
    """Return ``text`` as a TCP port, or None when it is not a usable port."""
    try:
        port = int(str(text).strip())
    except (TypeError, ValueError):
        return None
    if not MIN_PORT <= port <= MAX_PORT:
        LOG.warning("Ignoring out-of-range port %s", port)
        return None
    return port


def parse_port_list(value: str) -> List[int]:
    """Parse a comma separated list such as ``"3000, 3001,3002"``."""
    ports = []
    for part in value.split(","):
        port = parse_port(part)
        if port is not None:
            ports.append(port)
    return ports


def parse_positional_ports(args: Iterable[str]) -> List[int]:
    ports = []
    for arg in args:
        if arg.startswith("--"):
            continue
        port = parse_port(arg)
        if port is not None:
            ports.append(port)
    return ports


def unique_ports(ports: Iterable[int]) -> List[int]:
    seen = set()
    out = []
    for port in ports:
        if port in seen:
            LOG.warning("Port %d listed more than once, starting it once", port)
            continue
        seen.add(port)
        out.append(port)
    return out


def format_ports(ports: Iterable[int], sep: str = ", ") -> str:
    return sep.join(str(p) for p in ports)
