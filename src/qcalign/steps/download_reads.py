import os
import re
from pathlib import Path
from ..constants import RAW_R1, RAW_R2, READS_FOLDER
from ..models import ReadsManifest
from .common import Init, RequireFiles

RUN_ACCESSION = re.compile(r"^[SED]RR\d{6,9}$")

def EnaFastqUrls(accession: str, base_url: str):
    """ftp urls of the paired fastq files of an SRA/ENA run

    ENA groups runs as <first 6 chars>/<subdir>/<accession>, where the subdir
    holds the trailing digits beyond the 6th, zero padded to 3, and is absent
    for runs with 6 digits.
    """
    if RUN_ACCESSION.match(accession) is None:
        raise ValueError(f"[{accession}] is not a run accession")
    digits = len(accession) - 3
    parts = [accession[:6]]
    if digits > 6:
        parts.append(accession[-(digits-6):].zfill(3))
    parts.append(accession)
    folder = "/".join([base_url.rstrip("/")]+parts)
    return [f"{folder}/{accession}_{i}.fastq.gz" for i in [1, 2]]

def Procedure(args):
    C = Init(args, __file__)
    conf = C.config
    reads_dir = Path(conf.reads_dir) if conf.reads_dir is not None else C.root_workspace.joinpath(READS_FOLDER)
    os.makedirs(reads_dir, exist_ok=True)
    man = ReadsManifest.Expected(conf.samples, reads_dir, RAW_R1, RAW_R2)

    if not conf.download:
        C.log.info("downloads disabled, using local reads")
        RequireFiles(C, man.AllReads(), "raw reads")
    else:
        for s, f, r in man.Pairs():
            for local, url in zip([f, r], EnaFastqUrls(s, conf.base_url)):
                if local.exists():
                    C.log.info(f"{local.name} present, skipping download")
                    continue
                C.log.info(f"downloading {url}")
                C.shell(f"wget -c -O {local}.part {url} && mv {local}.part {local}")

    C.log.info(f"{len(man.samples)} samples ready in [{reads_dir}]")
    man.Save(C.expected_output)
