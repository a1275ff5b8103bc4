import os
from ..constants import ALIGN_FOLDER
from ..models import AlignmentManifest, ReadsManifest, Reference
from .common import Init, RequireFiles

def Procedure(args):
    C = Init(args, __file__)
    reads = ReadsManifest.Load(C.NextArg())
    ref = Reference.Load(C.NextArg())

    # checks before any tool runs
    RequireFiles(C, [ref.fasta], "reference")
    RequireFiles(C, reads.AllReads(), "trimmed reads")
    n_seqs = Reference.CountRecords(ref.fasta)
    if n_seqs == 0:
        raise ValueError(f"reference [{ref.fasta}] has no fasta records")
    C.log.info(f"reference has {n_seqs} sequence(s)")

    out_dir = C.root_workspace.joinpath(ALIGN_FOLDER)
    os.makedirs(out_dir, exist_ok=True)
    index = out_dir.joinpath(C.config.index_name)

    C.log.info(f"building hisat2 index [{index}]")
    C.shell(f"""\
        hisat2-build -p {C.threads} {ref.fasta} {index}
    """)

    bams, flagstats = [], []
    for i, (s, r1, r2) in enumerate(reads.Pairs()):
        C.log.info(f">>> aligning {i+1} of {len(reads.samples)}: {s}")
        bam = out_dir.joinpath(f"{s}.sorted.bam")
        flagstat = out_dir.joinpath(f"{s}_flagstat.txt")
        hisat_log = out_dir.joinpath(f"{s}_hisat2.log")
        C.shell(f"""\
            hisat2 -p {C.threads} -x {index} -1 {r1} -2 {r2} 2>{hisat_log} \
            | samtools sort -@ {C.threads} -o {bam} -
            samtools index {bam}
            samtools flagstat {bam} >{flagstat}
        """)
        bams.append(bam)
        flagstats.append(flagstat)

    AlignmentManifest(index, reads.samples, bams, flagstats).Save(C.expected_output)
