"""
ScriptProcess — owned child process for one running animation script

Both pipes are non-blocking so the driver thread never waits on a script:
- writes are queued and flushed as far as the pipe accepts
- reads drain whatever is available and return complete lines

Killed processes that have not exited yet are parked in a module-level list
and reaped by later calls to reap_detached(), so stop() never blocks.
"""

import os
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from animscript.errors import ChildTermination
from animscript.models.enums import LogCategory
from animscript.utils.logger import get_logger

log = get_logger().for_category(LogCategory.PROCESS)

READ_CHUNK = 65536

# Killed but not yet exited
_detached: List[subprocess.Popen] = []


def _close_pipes(proc: subprocess.Popen) -> None:
    for pipe in (proc.stdin, proc.stdout):
        if pipe is None:
            continue
        try:
            pipe.close()
        except OSError:
            pass


def reap_detached() -> int:
    """
    Collect detached processes that have exited.

    Returns:
        Number of processes still waiting to exit
    """
    for proc in list(_detached):
        if proc.poll() is not None:
            _close_pipes(proc)
            _detached.remove(proc)
            log.debug(f"Reaped script process {proc.pid}", returncode=proc.returncode)
    return len(_detached)


class ScriptProcess:
    """
    Child process speaking the run protocol over stdin/stdout

    Example:
        with ScriptProcess(path) as proc:
            proc.write_lines(["begin run", "frame 0"])
            for line in proc.read_lines():
                ...

    Raises:
        OSError: the executable could not be started
    """

    def __init__(self, path: Path, args: Sequence[str] = ("--ckb-run",)):
        self.path = Path(path)
        self._proc = subprocess.Popen(
            [str(self.path), *args],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            bufsize=0,
        )
        os.set_blocking(self._proc.stdin.fileno(), False)
        os.set_blocking(self._proc.stdout.fileno(), False)

        self._out = bytearray()
        self._in = bytearray()
        self.eof = False

        log.debug(f"Spawned {self.path.name}", pid=self._proc.pid)

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def running(self) -> bool:
        return self._proc.poll() is None

    # ------------------------------------------------------------
    # Output to script
    # ------------------------------------------------------------

    def write_lines(self, lines: Iterable[str]) -> None:
        """
        Queue lines for the script and flush what the pipe accepts.

        Raises:
            ChildTermination: the script closed its stdin
        """
        for line in lines:
            self._out += line.encode("utf-8") + b"\n"
        self.flush()

    def flush(self) -> None:
        while self._out:
            try:
                written = os.write(self._proc.stdin.fileno(), self._out)
            except BlockingIOError:
                return
            except (BrokenPipeError, ValueError, OSError) as ex:
                self._out.clear()
                raise ChildTermination(f"{self.path.name} closed its input") from ex
            del self._out[:written]

    # ------------------------------------------------------------
    # Input from script
    # ------------------------------------------------------------

    def read_lines(self) -> List[str]:
        """Drain available output and return complete, trimmed lines"""
        while not self.eof:
            try:
                chunk = os.read(self._proc.stdout.fileno(), READ_CHUNK)
            except BlockingIOError:
                break
            except (ValueError, OSError):
                chunk = b""
            if not chunk:
                self.eof = True
                break
            self._in += chunk

        *complete, rest = self._in.split(b"\n")
        self._in = bytearray(rest)
        if self.eof and rest:
            complete.append(rest)
            self._in.clear()
        return [line.decode("utf-8", "replace").strip() for line in complete]

    # ------------------------------------------------------------
    # Termination
    # ------------------------------------------------------------

    def kill(self, timeout: Optional[float] = None) -> bool:
        """
        Kill the script, waiting up to `timeout` seconds for it to exit.

        Returns:
            True if the process has exited
        """
        if self.running:
            self._proc.kill()
        if timeout:
            try:
                self._proc.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                log.warn(f"{self.path.name} did not exit after kill", pid=self.pid, timeout=timeout)
        exited = self._proc.poll() is not None
        if exited:
            _close_pipes(self._proc)
        return exited

    def detach(self) -> None:
        """Kill without waiting, leaving cleanup to reap_detached()"""
        if not self.kill():
            _detached.append(self._proc)

    def __enter__(self) -> "ScriptProcess":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()
