import os, sys
from pathlib import Path
from dataclasses import dataclass
import logging
from typing import Callable

from ..constants import LOG_FOLDER, PARAMS_FILE
from ..models import PipelineConfig
from ..process_management import Shell, ShellResult, StripANSI

class StepFailed(Exception):
    def __init__(self, step: str, cmd: str, exit_code: int|None) -> None:
        self.step = step
        self.cmd = cmd
        self.exit_code = exit_code
        super().__init__(f"[{step}] command exited with status {exit_code}")

@dataclass
class Context:
    name: str
    threads: int
    expected_output: Path
    out_dir: Path
    root_workspace: Path
    log: logging.Logger
    log_file: Path
    args: list[str]
    config: PipelineConfig
    shell: Callable[[str], ShellResult]

    _i = -1
    def NextArg(self):
        self._i += 1
        return self.args[self._i]

def _configure_log(log_file: Path, level):
    log = logging.getLogger('step_logger')
    log.setLevel(level)
    log.propagate = False
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    fmt = logging.Formatter('%(asctime)s %(levelname)s: %(message)s', datefmt='%H:%M:%S')
    for h in [logging.FileHandler(log_file, mode='a'), logging.StreamHandler(sys.stderr)]:
        h.setFormatter(fmt)
        log.addHandler(h)
    return log

def Init(args, name: str, level=logging.INFO):
    if "/" in name: name = name.split("/")[-1]
    name = name.replace(".py", "")
    N = 2
    threads, output = args[:N]
    ws = Path(".").absolute()
    out_dir = ws.joinpath(output).parent
    if not out_dir.exists(): os.makedirs(out_dir)
    config = PipelineConfig.Load(ws.joinpath(PARAMS_FILE))
    log_dir = ws.joinpath(LOG_FOLDER)
    if not log_dir.exists(): os.makedirs(log_dir)
    log_file = log_dir.joinpath(f"{name}.log")
    log = _configure_log(log_file, level)
    log.info(f"-- START {name} --")

    def _shell(cmd: str):
        def _log(x: str):
            with open(log_file, "a") as f:
                f.write(StripANSI(x))
        r = Shell(cmd, _log, lambda x: _log(f"ERR: {x}"))
        if r.killed:
            log.error("killed")
            sys.exit(1)
        if r.exit_code != 0:
            log.error(f"command failed with status {r.exit_code}, see [{log_file}]")
            raise StepFailed(name, cmd, r.exit_code)
        return r

    return Context(
        name=name,
        threads=int(threads),
        expected_output=ws.joinpath(output),
        out_dir=out_dir,
        root_workspace=ws,
        log=log,
        log_file=log_file,
        args=args[N:],
        config=config,
        shell=_shell,
    )

def RequireFiles(C: Context, files: list[Path], what: str):
    missing = [f for f in files if not Path(f).exists()]
    for f in missing:
        C.log.error(f"{what} not found: [{f}]")
    if len(missing) > 0:
        raise FileNotFoundError(f"{len(missing)} {what} missing, first: {missing[0]}")
