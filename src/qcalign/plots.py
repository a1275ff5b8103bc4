from pathlib import Path
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .tables import ReadTable

def PlotMappingPercent(table: Path, out: Path, dpi: int=150):
    df = ReadTable(table, ["mapping_percent"])
    fig, ax = plt.subplots()
    ax.bar(df["sample"], df["mapping_percent"])
    ax.set_ylabel("Mapping (%)")
    ax.set_title("HISAT2 Mapping Percentage")
    fig.tight_layout()
    fig.savefig(out, dpi=dpi)
    plt.close(fig)
    return out

def PlotTotalVsMapped(table: Path, out: Path, dpi: int=150):
    df = ReadTable(table, ["total_reads", "mapped_reads"])
    x = np.arange(len(df))
    w = 0.4
    fig, ax = plt.subplots()
    ax.bar(x - w/2, df["total_reads"], width=w, label="Total")
    ax.bar(x + w/2, df["mapped_reads"], width=w, label="Mapped")
    ax.set_xticks(x)
    ax.set_xticklabels(df["sample"])
    ax.set_ylabel("Reads")
    ax.set_title("Total vs Mapped Reads")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out, dpi=dpi)
    plt.close(fig)
    return out
