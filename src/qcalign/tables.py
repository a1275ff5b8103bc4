from pathlib import Path
import pandas as pd

from .reports import DuplicationRate, KeptPercent, ParseFastpJson, ParseFastqcDeduplicated, ParseFlagstat

ALIGNMENT_COLUMNS = "sample, total_reads, mapped_reads, mapping_percent".split(", ")
RAW_COUNTS_COLUMNS = "sample, raw_read_pairs, duplication_rate_percent".split(", ")
CLEANING_COLUMNS = "sample, raw_read_pairs, cleaned_read_pairs, kept_percent".split(", ")

def _write(rows: list[list[str]], columns: list[str], out: Path):
    # values are kept as the literal strings scraped from the reports
    df = pd.DataFrame(rows, columns=columns, dtype=str)
    df.to_csv(out, sep="\t", index=False)
    return df

def AlignmentTable(samples: list[str], flagstats: list[Path], out: Path):
    rows = []
    for s, fs in zip(samples, flagstats):
        total, mapped, pct = ParseFlagstat(fs)
        rows.append([s, total, mapped, pct])
    return _write(rows, ALIGNMENT_COLUMNS, out)

def RawCountsTable(samples: list[str], fastp_json: list[Path], dedup_reports: list[tuple[Path|None, Path|None]], out: Path):
    rows = []
    for s, js, (d1, d2) in zip(samples, fastp_json, dedup_reports):
        raw, _ = ParseFastpJson(js)
        dup = DuplicationRate(ParseFastqcDeduplicated(d1), ParseFastqcDeduplicated(d2))
        rows.append([s, raw, dup])
    return _write(rows, RAW_COUNTS_COLUMNS, out)

def CleaningTable(samples: list[str], fastp_json: list[Path], out: Path):
    rows = []
    for s, js in zip(samples, fastp_json):
        raw, cleaned = ParseFastpJson(js)
        rows.append([s, raw, cleaned, KeptPercent(raw, cleaned)])
    return _write(rows, CLEANING_COLUMNS, out)

def ReadTable(path: Path, numeric: list[str]):
    df = pd.read_csv(path, sep="\t", dtype={"sample": str})
    for col in numeric:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df
