import os
import re
import signal
from dataclasses import dataclass
from typing import IO, Any, Callable
from threading import Thread
import subprocess

@dataclass
class ShellResult:
    killed: bool
    exit_code: int|None

    @property
    def ok(self):
        return not self.killed and self.exit_code == 0

# example: colors, escape, control sequences
# https://stackoverflow.com/questions/14693701/how-can-i-remove-the-ansi-escape-sequences-from-a-string-in-python
def StripANSI(s: str):
    return re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])').sub('', s)

def Shell(cmd: str, on_out: Callable[[str], Any]|None=None, on_err: Callable[[str], Any]|None=None):
    """runs [cmd] as a bash script that stops at the first failing command or pipe stage"""
    killed = False
    with LiveShell(cmd) as shell:
        if on_out is not None: shell.RegisterOnOut(on_out)
        if on_err is not None: shell.RegisterOnErr(on_err)
        shell.Start()
        try:
            shell.Wait()
        except KeyboardInterrupt:
            killed = True
            try:
                os.killpg(os.getpgid(shell.pid), signal.SIGTERM)
            except ProcessLookupError:
                pass
            shell.Wait()
    return ShellResult(killed, shell.ExitCode())

class LiveShell:
    ENCODING = "utf-8"

    def __init__(self, cmd: str) -> None:
        script = "set -euo pipefail\n" + cmd
        self._console = subprocess.Popen(
            ["/bin/bash", "-c", script],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True, # own process group, so ctrl-c can take down pipes
        )
        self.pid = self._console.pid
        self._on_out_callbacks: list[Callable[[str], Any]] = []
        self._on_err_callbacks: list[Callable[[str], Any]] = []
        self._workers: list[Thread] = []

    def _reader(self, io: IO[bytes], callbacks: list[Callable[[str], Any]]):
        for line in iter(io.readline, b''):
            decoded = self.Decode(line)
            for cb in callbacks: cb(decoded)
        io.close()

    def Decode(self, payload: bytes):
        return payload.decode(encoding=self.ENCODING, errors="replace")

    def RegisterOnOut(self, callback: Callable[[str], Any]):
        self._on_out_callbacks.append(callback)

    def RegisterOnErr(self, callback: Callable[[str], Any]):
        self._on_err_callbacks.append(callback)

    def Start(self):
        for io, callbacks in [
            (self._console.stdout, self._on_out_callbacks),
            (self._console.stderr, self._on_err_callbacks),
        ]:
            w = Thread(target=self._reader, args=[io, callbacks])
            w.start()
            self._workers.append(w)

    def Wait(self):
        self._console.wait()
        for w in self._workers:
            w.join()

    def ExitCode(self):
        return self._console.poll()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.Dispose()
        return

    def Dispose(self):
        if self._console.poll() is None:
            self._console.terminate()
            self._console.wait()
