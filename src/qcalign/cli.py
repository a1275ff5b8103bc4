# This file is part of qcalign.
#
# qcalign is free software: you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# qcalign is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with qcalign. If not, see <https://www.gnu.org/licenses/>.

import os, sys
from pathlib import Path
import argparse
import inspect
import importlib

from .constants import MULTIQC_RAW, MULTIQC_TRIMMED, PARAMS_FILE, FASTQC_RAW_FOLDER, FASTQC_TRIMMED_FOLDER, TRIM_FOLDER, TRIMMED_R1, TRIMMED_R2, RAW_R1, RAW_R2, READS_FOLDER
from .models import AlignmentManifest, AlignmentSummary, FastpReports, FastqcReports, PipelineConfig, QCTables, ReadsManifest, Reference
from .steps.common import StepFailed
from .utils import NAME, USER, VERSION, ENTRY_POINTS, StdTime

CLI_ENTRY = ENTRY_POINTS[0].split(" ")[0]
# failures that stop a run with a message instead of a traceback
STEP_ERRORS = (StepFailed, FileNotFoundError, ValueError)

class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(2, '\n%s: error: %s\n' % (self.prog, message))

def _qc_steps():
    return [
        ("download_reads", ReadsManifest.RAW, []),
        ("qc_reads", FastqcReports.RAW, [ReadsManifest.RAW, FASTQC_RAW_FOLDER, MULTIQC_RAW]),
        ("quality_trim", FastpReports.MANIFEST, [ReadsManifest.RAW]),
        ("qc_reads", FastqcReports.TRIMMED, [ReadsManifest.TRIMMED, FASTQC_TRIMMED_FOLDER, MULTIQC_TRIMMED, TRIM_FOLDER]),
        ("qc_tables", QCTables.MANIFEST, [FastpReports.MANIFEST, FastqcReports.RAW, ReadsManifest.RAW]),
    ]

def _align_steps():
    return [
        ("align_reads", AlignmentManifest.MANIFEST, [ReadsManifest.TRIMMED, Reference.ARG_FILE]),
        ("summarize_alignment", AlignmentSummary.MANIFEST, [AlignmentManifest.MANIFEST]),
    ]

def RunSteps(workspace: Path, steps: list, threads: int):
    """runs steps in order from [workspace], stopping at the first failure"""
    original_dir = os.getcwd()
    os.chdir(workspace)
    try:
        for i, (step, output, step_args) in enumerate(steps):
            print(f"[{i+1}/{len(steps)}] {step}", file=sys.stderr)
            start = StdTime.CurrentTimeMillis()
            mo = importlib.import_module(name=f".steps.{step}", package=NAME)
            try:
                mo.Procedure([str(threads), str(output)]+[str(a) for a in step_args])
            except STEP_ERRORS as e:
                print(f"pipeline stopped at {step}: {e}", file=sys.stderr)
                return 1
            elapsed = (StdTime.CurrentTimeMillis()-start)/1000
            print(f"[{i+1}/{len(steps)}] {step} done in {elapsed:.1f}s", file=sys.stderr)
    finally:
        os.chdir(original_dir)
    return 0

class CommandLineInterface:
    def _get_fn_name(self):
        return inspect.stack()[1][3]

    def _parser(self, prog: str):
        parser = ArgumentParser(prog = f'{CLI_ENTRY} {prog}')
        paths = parser.add_argument_group(title="main")
        paths.add_argument("-o", "--output", metavar="PATH", required=True,
            help="path to output folder, will be created if non-existent")
        paths.add_argument("-c", "--config", metavar="YAML", required=False,
            help="yaml config, command line options take precedence")
        paths.add_argument("-s", "--samples", metavar="ACCESSION", nargs='*', required=False, default=[],
            help="SRA/ENA run accessions of the paired-end samples")
        paths.add_argument("-r", "--reference", metavar="FASTA", required=False,
            help="reference genome to align to")
        paths.add_argument("--reads", metavar="PATH", required=False,
            help="folder with the reads; raw reads as <sample>_1.fastq.gz for qc/run, trimmed reads as <sample>_trimmed_1.fastq.gz for align")

        parser.add_argument("--no_download", action="store_true", default=False, required=False,
            help="do not download missing raw reads, fail instead")
        parser.add_argument("-t", "--threads", metavar="INT", type=int, required=False,
            help="threads passed to each tool, default: 10")
        return parser

    def _prepare(self, prog: str, raw_args, mode: str):
        """parses and verifies inputs, returns the workspace or None on invalid input"""
        parser = self._parser(prog)
        args = parser.parse_args(raw_args)

        input_error = False
        _printed = False
        def _error(message: str):
            nonlocal input_error, _printed
            if not _printed:
                parser.print_help()
                print()
                _printed = True
            print(f"Invalid input: {message}")
            input_error = True

        output = Path(args.output).absolute()
        config = PipelineConfig.Parse(args, _error)

        if mode == "qc" or mode == "run":
            reads_dir = Path(config.reads_dir) if config.reads_dir is not None else output.joinpath(READS_FOLDER)
            if not config.download:
                ReadsManifest.Parse(config.samples, reads_dir, RAW_R1, RAW_R2, _error)
        reference = None
        if mode == "align" or mode == "run":
            reference = Reference.Parse(config, _error)
        trimmed = None
        if mode == "align":
            reads_dir = Path(config.reads_dir) if config.reads_dir is not None else output.joinpath(TRIM_FOLDER)
            trimmed = ReadsManifest.Parse(config.samples, reads_dir, TRIMMED_R1, TRIMMED_R2, _error)

        if input_error: return None, config

        if not output.exists(): os.makedirs(output)
        config.Save(output.joinpath(PARAMS_FILE),
            command=mode,
            started=StdTime.Timestamp(),
            current_directory=os.getcwd(),
            version=VERSION,
        )
        if reference is not None: reference.Save(output.joinpath(Reference.ARG_FILE))
        if trimmed is not None: trimmed.Save(output.joinpath(ReadsManifest.TRIMMED))
        return output, config

    def run(self, raw_args):
        """qc, read cleaning and alignment"""
        ws, config = self._prepare(self._get_fn_name(), raw_args, "run")
        if ws is None: return 1
        return RunSteps(ws, _qc_steps()+_align_steps(), config.threads)

    def qc(self, raw_args):
        """qc and read cleaning only"""
        ws, config = self._prepare(self._get_fn_name(), raw_args, "qc")
        if ws is None: return 1
        return RunSteps(ws, _qc_steps(), config.threads)

    def align(self, raw_args):
        """alignment of previously trimmed reads"""
        ws, config = self._prepare(self._get_fn_name(), raw_args, "align")
        if ws is None: return 1
        return RunSteps(ws, _align_steps(), config.threads)

    def api(self, raw_args=None):
        parser = ArgumentParser(
            prog = f'{CLI_ENTRY} {self._get_fn_name()}',
            description=f"runs a single step, call from an output folder prepared by run, qc or align"
        )

        parser.add_argument("--step", required=True)
        parser.add_argument("--args", nargs='*', required=False, default=[])
        args = parser.parse_args(raw_args)

        mo = importlib.import_module(name=f".steps.{args.step}", package=NAME)
        try:
            mo.Procedure(args.args)
        except KeyboardInterrupt:
            return 1
        except STEP_ERRORS as e:
            print(f"step {args.step} failed: {e}", file=sys.stderr)
            return 1
        return 0

    def help(self, args=None):
        help = [
            f"{NAME} v{VERSION}",
            f"https://github.com/{USER}/{NAME}",
            f"",
            f"Syntax: {CLI_ENTRY} COMMAND [OPTIONS]",
            f"",
            f"Where COMMAND is one of:",
        ]+[f"- {k}" for k in COMMANDS]+[
            f"",
            f"for additional help, use:",
            f"{CLI_ENTRY} COMMAND -h/--help",
        ]
        help = "\n".join(help)
        print(help)
        return 0
COMMANDS = {k:v for k, v in CommandLineInterface.__dict__.items() if k[0]!="_"}

def main():
    cli = CommandLineInterface()
    if len(sys.argv) <= 1:
        cli.help()
        return

    code = COMMANDS.get(# calls command function with args
        sys.argv[1],
        CommandLineInterface.help # default
    )(cli, sys.argv[2:]) # cli is instance of "self"
    sys.exit(code or 0)

if __name__ == "__main__":
    main()
