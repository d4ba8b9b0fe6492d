#!/usr/bin/env python3
"""
Billdesk management CLI.

    python manage.py start      run the API in the background
    python manage.py stop       send SIGTERM and wait
    python manage.py restart
    python manage.py dev        foreground with auto-reload
    python manage.py status     process state and /api/health
"""

import argparse
import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

import httpx

from billdesk.config import get_settings

ROOT_DIR = Path(__file__).resolve().parent
APP_PATH = "billdesk.api.main:app"
STOP_TIMEOUT = 3.0


class ServerProcess:
    """Tracks the background uvicorn process through a pid file."""

    def __init__(self, pid_file: Path = ROOT_DIR / ".billdesk.pid"):
        self.pid_file = pid_file

    @staticmethod
    def alive(pid: int) -> bool:
        try:
            os.kill(pid, 0)
        except OSError:
            return False
        return True

    @property
    def pid(self) -> int | None:
        try:
            pid = int(self.pid_file.read_text().strip())
        except (FileNotFoundError, ValueError):
            return None
        if not self.alive(pid):
            self.pid_file.unlink(missing_ok=True)
            return None
        return pid

    def spawn(self, cmd: list[str]) -> int:
        proc = subprocess.Popen(cmd, cwd=ROOT_DIR)
        self.pid_file.write_text(str(proc.pid))
        return proc.pid

    def terminate(self, pid: int) -> bool:
        """SIGTERM ``pid`` and wait up to ``STOP_TIMEOUT`` seconds for it to exit."""
        try:
            os.kill(pid, signal.SIGTERM)
        except OSError:
            pass
        deadline = time.monotonic() + STOP_TIMEOUT
        while self.alive(pid) and time.monotonic() < deadline:
            time.sleep(0.1)
        self.pid_file.unlink(missing_ok=True)
        return not self.alive(pid)


server = ServerProcess()


def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        return sock.connect_ex((host, port)) == 0


def uvicorn_command(host: str, port: int, *, reload: bool = False) -> list[str]:
    cmd = [sys.executable, "-m", "uvicorn", APP_PATH, "--host", host, "--port", str(port)]
    return cmd + ["--reload"] if reload else cmd


def cmd_start(args: argparse.Namespace) -> int:
    """Start the API in the background."""
    if (pid := server.pid) is not None:
        print(f"Already running as PID {pid}; use stop or restart.")
        return 1
    if port_in_use(args.host, args.port):
        print(f"Port {args.port} on {args.host} is taken.")
        return 1

    pid = server.spawn(uvicorn_command(args.host, args.port))
    print(f"Started PID {pid}, serving http://{args.host}:{args.port}/api")
    return 0


def cmd_stop(args: argparse.Namespace) -> int:
    """Stop the background API."""
    pid = server.pid
    if pid is None:
        print("Not running.")
        return 0
    if server.terminate(pid):
        print(f"Stopped PID {pid}.")
        return 0
    print(f"PID {pid} did not exit within {STOP_TIMEOUT:.0f}s.")
    return 1


def cmd_restart(args: argparse.Namespace) -> int:
    """Stop, then start."""
    return cmd_stop(args) or cmd_start(args)


def cmd_dev(args: argparse.Namespace) -> int:
    """Run in the foreground with auto-reload."""
    try:
        return subprocess.call(uvicorn_command(args.host, args.port, reload=True), cwd=ROOT_DIR)
    except KeyboardInterrupt:
        return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show the process state and query /api/health."""
    pid = server.pid
    print("process  " + (f"PID {pid}" if pid else "stopped"))

    try:
        health = httpx.get(f"http://{args.host}:{args.port}/api/health", timeout=3.0).json()
    except (httpx.HTTPError, ValueError) as e:
        print(f"health   unreachable ({type(e).__name__})")
        return 1
    print(
        f"health   {health.get('status')} v{health.get('version')}, "
        f"{health.get('open_sessions', 0)} open session(s)"
    )
    return 0


COMMANDS = {
    "start": cmd_start,
    "stop": cmd_stop,
    "restart": cmd_restart,
    "dev": cmd_dev,
    "status": cmd_status,
}


def main() -> None:
    api = get_settings().api
    parser = argparse.ArgumentParser(description="Billdesk management CLI")
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--host", default=api.host)
    parser.add_argument("--port", type=int, default=api.port)

    args = parser.parse_args()
    sys.exit(COMMANDS[args.command](args))


if __name__ == "__main__":
    main()
