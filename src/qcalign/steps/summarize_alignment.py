import os
from ..constants import ALIGNMENT_TABLE, PLOT_MAPPING_PERCENT, PLOT_TOTAL_VS_MAPPED, SUMMARY_FOLDER
from ..models import AlignmentManifest, AlignmentSummary
from ..plots import PlotMappingPercent, PlotTotalVsMapped
from ..tables import AlignmentTable
from .common import Init

def Procedure(args):
    C = Init(args, __file__)
    alignments = AlignmentManifest.Load(C.NextArg())

    out_dir = C.root_workspace.joinpath(SUMMARY_FOLDER)
    os.makedirs(out_dir, exist_ok=True)
    table = out_dir.joinpath(ALIGNMENT_TABLE)
    df = AlignmentTable(alignments.samples, alignments.flagstats, table)
    C.log.info(f"alignment summary:\n{df.to_string(index=False)}")

    dpi = int(C.config.dpi)
    plots = [
        PlotMappingPercent(table, out_dir.joinpath(PLOT_MAPPING_PERCENT), dpi),
        PlotTotalVsMapped(table, out_dir.joinpath(PLOT_TOTAL_VS_MAPPED), dpi),
    ]
    C.log.info(f"plots written to [{out_dir}]")
    AlignmentSummary(table, plots).Save(C.expected_output)
