import os
from ..constants import SUMMARY_FOLDER
from ..models import FastqcReports, ReadsManifest
from ..reports import FastqcDataPath
from .common import Init, RequireFiles

def Procedure(args):
    C = Init(args, __file__)
    reads = ReadsManifest.Load(C.NextArg())
    fastqc_dir = C.root_workspace.joinpath(C.NextArg())
    report_name = C.NextArg()
    # other folders for multiqc to pick up, ex. fastp reports
    extra_dirs = [C.root_workspace.joinpath(d) for d in C.args[3:]]

    all_reads = reads.AllReads()
    RequireFiles(C, all_reads, "read files")
    os.makedirs(fastqc_dir, exist_ok=True)
    summary_dir = C.root_workspace.joinpath(SUMMARY_FOLDER)
    os.makedirs(summary_dir, exist_ok=True)

    C.log.info(f"running fastqc on {len(all_reads)} read files")
    C.shell(f"""\
        fastqc --extract -t {C.threads} -o {fastqc_dir} {" ".join(str(r) for r in all_reads)}
    """)

    C.log.info(f"aggregating reports into {report_name}")
    C.shell(f"""\
        multiqc --force -o {summary_dir} -n {report_name} {fastqc_dir} {" ".join(str(d) for d in extra_dirs)}
    """)

    FastqcReports(
        reads=all_reads,
        data=[FastqcDataPath(fastqc_dir, r) for r in all_reads],
        multiqc=summary_dir.joinpath(report_name),
    ).Save(C.expected_output)
