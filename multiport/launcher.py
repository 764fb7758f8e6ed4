"""Spawn, watch and stop several copies of the hello server.

Each child runs with ``PORT`` set in its environment. Output from the
children is forwarded through the ``launcher`` logger, tagged with the
child's port.
"""
from typing import Iterable, List, NamedTuple, Optional
import logging
import os
import signal
import subprocess
import sys
import threading
import time

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import RELOAD, SHUTDOWN_GRACE
from .ports import format_ports

LOG = logging.getLogger("launcher")

# stdout lines containing one of these are forwarded, the rest is dropped
RELEVANT_MARKERS = ("Server running", "error", "Error")


def is_relevant(line: str) -> bool:
    return any(marker in line for marker in RELEVANT_MARKERS)


def default_server_command(reload: bool = RELOAD) -> List[str]:
    return [sys.executable, "-m", "multiport", "--reload" if reload else "--no-reload"]


class ServerProcess:
    def __init__(self, port: int, process: subprocess.Popen):
        self.port = port
        self.process = process
        self.readers: List[threading.Thread] = []

    @property
    def alive(self) -> bool:
        return self.process.poll() is None

    def __repr__(self):
        return f"ServerProcess(port={self.port}, pid={self.process.pid})"


class Supervisor:
    """Keeps track of the running server children.

    A child is listed from the moment it is spawned until a watcher thread
    sees it exit. Readers of the list always get a copy.
    """

    def __init__(self, command: Iterable[str], env=None, logger: Optional[logging.Logger] = None):
        self.command = list(command)
        self.env = env
        self.log = logger or LOG
        self._lock = threading.Lock()
        self._processes: List[ServerProcess] = []
        self._idle = threading.Event()
        self._idle.set()
        self._stop_requested = threading.Event()

    def running(self) -> List[ServerProcess]:
        with self._lock:
            return list(self._processes)

    def start(self, port: int) -> ServerProcess:
        """Spawn one child on ``port``. Raises OSError when it cannot be spawned."""
        self.log.info("Starting server on port %d...", port)
        env = dict(os.environ if self.env is None else self.env)
        env["PORT"] = str(port)
        env.setdefault("PYTHONUNBUFFERED", "1")
        proc = subprocess.Popen(
            self.command,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
        )
        child = ServerProcess(port, proc)
        with self._lock:
            self._processes.append(child)
            self._idle.clear()

        child.readers = [
            threading.Thread(target=self._forward, args=(child, proc.stdout, True), daemon=True),
            threading.Thread(target=self._forward, args=(child, proc.stderr, False), daemon=True),
        ]
        for t in child.readers:
            t.start()
        threading.Thread(target=self._watch, args=(child,), daemon=True).start()
        return child

    def _forward(self, child: ServerProcess, stream, relevant_only: bool):
        try:
            for line in stream:
                line = line.rstrip()
                if not line:
                    continue
                if relevant_only and not is_relevant(line):
                    continue
                self.log.info("[Port %d] %s", child.port, line)
        except ValueError:
            # stream closed underneath us
            pass
        finally:
            stream.close()

    def _watch(self, child: ServerProcess):
        code = child.process.wait()
        # let the readers drain so the exit message comes last
        for t in child.readers:
            t.join(timeout=1.0)
        self.log.info("[Port %d] Server stopped with code %s", child.port, code)
        with self._lock:
            if child in self._processes:
                self._processes.remove(child)
            if not self._processes:
                self._idle.set()

    def request_stop(self):
        self._stop_requested.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until no child is running or a stop was requested.

        Returns False if ``timeout`` expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._idle.is_set() and not self._stop_requested.is_set():
            step = 0.2
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                step = min(step, remaining)
            self._idle.wait(step)
        return True

    def stop_all(self, announce: bool = True):
        for child in self.running():
            if announce:
                self.log.info("[Port %d] Stopping server...", child.port)
            child.process.terminate()

    def shutdown(self, grace: float = SHUTDOWN_GRACE):
        self.request_stop()
        self.stop_all()
        if not self._idle.wait(grace):
            for child in self.running():
                if child.alive:
                    self.log.warning("[Port %d] Still running after %.1fs, killing", child.port, grace)
                    child.process.kill()
            self._idle.wait(grace)
        self.log.info("All servers stopped")


def run_servers(ports: List[int], supervisor: Optional[Supervisor] = None, grace: float = SHUTDOWN_GRACE) -> int:
    """Start a child per port and supervise them until they exit or a signal arrives."""
    supervisor = supervisor or Supervisor(default_server_command())
    LOG.info("Starting %d server instance(s) on ports: %s", len(ports), format_ports(ports))

    started = 0
    for port in ports:
        try:
            supervisor.start(port)
            started += 1
        except OSError:
            LOG.exception("Could not start server on port %d", port)
    if not started:
        LOG.error("No server could be started")
        return 1

    received = []

    def _on_signal(signum, frame):
        received.append(signum)
        supervisor.request_stop()

    previous = {sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    LOG.info("Press Ctrl+C to stop all servers")
    # handlers stay installed until the shutdown below has finished
    try:
        supervisor.wait()
        if not received:
            return 0
        if received[0] == signal.SIGTERM:
            LOG.info("Received SIGTERM, shutting down...")
            supervisor.stop_all(announce=False)
        else:
            LOG.info("Shutting down all servers...")
            supervisor.shutdown(grace)
        return 0
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


class PortStatus(NamedTuple):
    port: int
    ok: bool
    detail: str


def _session(retries: int = 2) -> requests.Session:
    session = requests.Session()
    retry = Retry(total=retries, backoff_factor=0.3, status_forcelist=(500, 502, 503, 504))
    session.mount("http://", HTTPAdapter(max_retries=retry))
    return session


def probe_ports(ports: Iterable[int], host: str = "127.0.0.1", timeout: float = 2.0, session=None) -> List[PortStatus]:
    """Call ``/api/hello`` on every port and report which servers answer."""
    session = session or _session()
    results = []
    for port in ports:
        url = f"http://{host}:{port}/api/hello"
        try:
            resp = session.get(url, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            LOG.debug("Probe of %s failed: %s", url, exc)
            results.append(PortStatus(port, False, type(exc).__name__))
            continue
        # requests.JSONDecodeError is a ValueError too
        try:
            body = resp.json()
        except ValueError:
            results.append(PortStatus(port, False, "invalid JSON"))
            continue
        message = body.get("message", "") if isinstance(body, dict) else ""
        results.append(PortStatus(port, True, str(message)))
    return results


def format_status(results: Iterable[PortStatus]) -> str:
    lines = []
    for r in results:
        state = "up" if r.ok else "down"
        lines.append(f"  [Port {r.port}] {state:<4} - {r.detail}")
    return "\n".join(lines)


def check_status(ports: List[int]) -> int:
    results = probe_ports(ports)
    print(format_status(results))
    return 0 if all(r.ok for r in results) else 1
