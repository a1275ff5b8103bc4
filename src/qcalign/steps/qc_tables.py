import os
from ..constants import CLEANING_TABLE, RAW_COUNTS_TABLE, SUMMARY_FOLDER
from ..models import FastpReports, FastqcReports, QCTables, ReadsManifest
from ..tables import CleaningTable, RawCountsTable
from .common import Init

def Procedure(args):
    C = Init(args, __file__)
    fastp = FastpReports.Load(C.NextArg())
    fastqc = FastqcReports.Load(C.NextArg())
    raw = ReadsManifest.Load(C.NextArg())

    out_dir = C.root_workspace.joinpath(SUMMARY_FOLDER)
    os.makedirs(out_dir, exist_ok=True)
    samples = raw.samples
    jsons = [fastp.JsonFor(s) for s in samples]
    dedup = [(fastqc.DataFor(f), fastqc.DataFor(r)) for _, f, r in raw.Pairs()]

    raw_counts = out_dir.joinpath(RAW_COUNTS_TABLE)
    df = RawCountsTable(samples, jsons, dedup, raw_counts)
    C.log.info(f"raw counts and duplication:\n{df.to_string(index=False)}")

    cleaning = out_dir.joinpath(CLEANING_TABLE)
    df = CleaningTable(samples, jsons, cleaning)
    C.log.info(f"raw vs cleaned:\n{df.to_string(index=False)}")

    QCTables(raw_counts, cleaning).Save(C.expected_output)
