"""Port profiles read from a JSON file (``ports.config.json`` by default).

The file is a JSON object mapping profile names to ``{"description", "ports"}``
objects. The special ``defaultPorts`` key holds a bare list used when no
profile applies. Entries that do not look like profiles are skipped.
"""
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple
import json
import logging

from pydantic import BaseModel

from .ports import format_ports, parse_port

LOG = logging.getLogger("profiles")

DEFAULT_PORTS_KEY = "defaultPorts"


class Profile(BaseModel):
    name: str
    ports: List[int] = []
    description: Optional[str] = None


def load_port_config(path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        LOG.warning("Could not load %s, using defaults", path.name)
        return {}
    if not isinstance(data, dict):
        LOG.warning("Could not load %s, using defaults", path.name)
        return {}
    return data


def _ports_of(value) -> List[int]:
    if not isinstance(value, list):
        return []
    ports = []
    for item in value:
        # JSON booleans are ints in Python
        if isinstance(item, bool):
            continue
        port = parse_port(item)
        if port is not None:
            ports.append(port)
    return ports


def iter_profiles(config: Dict[str, Any]) -> Iterator[Tuple[str, Dict[str, Any]]]:
    for name, value in config.items():
        if name == DEFAULT_PORTS_KEY or not isinstance(value, dict):
            continue
        yield name, value


def get_profile(config: Dict[str, Any], name: str) -> Optional[Profile]:
    value = config.get(name)
    if name == DEFAULT_PORTS_KEY or not isinstance(value, dict):
        return None
    ports = _ports_of(value.get("ports"))
    if not ports:
        return None
    description = value.get("description")
    return Profile(name=name, ports=ports, description=str(description) if description else None)


def default_ports(config: Dict[str, Any]) -> List[int]:
    return _ports_of(config.get(DEFAULT_PORTS_KEY))


def profile_ports(config: Dict[str, Any], name: str, fallback: List[int]) -> List[int]:
    profile = get_profile(config, name)
    return profile.ports if profile else list(fallback)


def format_profile_list(config: Dict[str, Any]) -> str:
    lines = ["Available profiles:", ""]
    for name, value in iter_profiles(config):
        ports = _ports_of(value.get("ports"))
        lines.append(f"  {name:<12} - {value.get('description') or 'No description'}")
        lines.append(f"  {'':<12}   Ports: {format_ports(ports) or 'Not configured'}")
        lines.append("")
    return "\n".join(lines)
