import json
import logging
import math
from pathlib import Path

from .constants import NA

FASTQ_EXTENSIONS = [".fastq.gz", ".fq.gz", ".fastq", ".fq"]

def _first_field(line: str):
    toks = line.split()
    return toks[0] if len(toks)>0 else NA

def _number(s) -> str:
    s = str(s).strip()
    if len(s) == 0: return NA
    try:
        v = float(s)
    except ValueError:
        return NA
    # old samtools writes -nan for empty alignments
    if not math.isfinite(v) or v < 0: return NA
    return s

def ParseFlagstat(path: str|Path):
    """total, mapped and mapping percent from a samtools flagstat report

    Both the old "(95.00%:-nan%)" and the newer "(95.00% : N/A)" layouts are
    handled. Anything not found is reported as NA.
    """
    total, mapped, pct = NA, NA, NA
    path = Path(path)
    if not path.exists():
        logging.warning(f"flagstat report [{path}] not found")
        return total, mapped, pct

    with open(path) as f:
        lines = f.readlines()
    for l in lines:
        if "in total" in l:
            total = _number(_first_field(l))
            break
    for l in lines:
        if " mapped (" in l:
            mapped = _number(_first_field(l))
            inside = l.split("(", 1)[1]
            if "%" in inside:
                pct = _number(inside.split("%", 1)[0])
            break
    return total, mapped, pct

def ParseFastpJson(path: str|Path):
    """total reads before and after filtering, as reported by fastp"""
    raw, cleaned = NA, NA
    path = Path(path)
    if not path.exists():
        logging.warning(f"fastp report [{path}] not found")
        return raw, cleaned
    try:
        with open(path) as j:
            summary = json.load(j).get("summary", {})
    except json.JSONDecodeError:
        logging.warning(f"fastp report [{path}] is not valid json")
        return raw, cleaned

    before = summary.get("before_filtering", {})
    after = summary.get("after_filtering", {})
    if "total_reads" in before: raw = _number(before["total_reads"])
    if "total_reads" in after: cleaned = _number(after["total_reads"])
    return raw, cleaned

def ParseFastqcDeduplicated(path: str|Path|None):
    """the "Total Deduplicated Percentage" of an extracted fastqc_data.txt"""
    if path is None: return NA
    path = Path(path)
    if not path.exists():
        logging.warning(f"fastqc data [{path}] not found")
        return NA
    with open(path) as f:
        for l in f:
            # written as "#Total Deduplicated Percentage" inside the duplication module
            if not l.lstrip("#").startswith("Total Deduplicated Percentage"): continue
            toks = l.rstrip("\n").split("\t")
            if len(toks) < 2: return NA
            return _number(toks[1].replace("%", ""))
    return NA

def KeptPercent(raw: str, cleaned: str):
    if NA in (raw, cleaned): return NA
    r, c = float(raw), float(cleaned)
    if r <= 0: return "0.00"
    return f"{c/r*100:.2f}"

def DuplicationRate(d1: str, d2: str):
    """100 - the mean deduplicated percentage of the available read directions"""
    available = [float(d) for d in (d1, d2) if d != NA]
    if len(available) == 0: return NA
    return f"{100 - sum(available)/len(available):.3f}"

def FastqcName(read: str|Path):
    name = Path(read).name
    for ext in FASTQ_EXTENSIONS:
        if name.endswith(ext):
            return name[:-len(ext)]
    return name

# fastqc --extract writes <name>_fastqc/fastqc_data.txt, name without fastq extensions
def FastqcDataPath(out_dir: Path, read: str|Path):
    return Path(out_dir).joinpath(f"{FastqcName(read)}_fastqc", "fastqc_data.txt")
