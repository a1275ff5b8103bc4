from pathlib import Path

NA = "NA"

DEFAULT_THREADS = 10
DEFAULT_SAMPLES = ["SRR9613403", "SRR9613404", "SRR9613405"]
ENA_FASTQ_URL = "ftp://ftp.sra.ebi.ac.uk/vol1/fastq"

READS_FOLDER = Path("reads")
FASTQC_RAW_FOLDER = Path("fastqc_raw")
FASTQC_TRIMMED_FOLDER = Path("fastqc_trimmed")
TRIM_FOLDER = Path("trimmed")
ALIGN_FOLDER = Path("alignment")
SUMMARY_FOLDER = Path("summary")
LOG_FOLDER = Path("logs")
PARAMS_FILE = Path("params.json")

MULTIQC_RAW = "multiqc_raw.html"
MULTIQC_TRIMMED = "multiqc_post_trim.html"

ALIGNMENT_TABLE = "alignment_summary.tsv"
RAW_COUNTS_TABLE = "qc_raw_counts_duplicates.tsv"
CLEANING_TABLE = "cleaning_raw_vs_trimmed.tsv"
PLOT_MAPPING_PERCENT = "plot_mapping_percent.png"
PLOT_TOTAL_VS_MAPPED = "plot_reads_total_vs_mapped.png"

# read file naming, {s} is the sample accession
RAW_R1, RAW_R2 = "{s}_1.fastq.gz", "{s}_2.fastq.gz"
TRIMMED_R1, TRIMMED_R2 = "{s}_trimmed_1.fastq.gz", "{s}_trimmed_2.fastq.gz"
