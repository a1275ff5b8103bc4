import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Callable
import json
import yaml
from Bio import SeqIO

from .constants import DEFAULT_SAMPLES, DEFAULT_THREADS, ENA_FASTQ_URL

class Saveable:
    def Save(self, path: str|Path):
        path = Path(path)
        if not path.parent.exists(): os.makedirs(path.parent)

        def _can_save(k, v):
            if k.upper() == k: return False
            if callable(v): return False
            if isinstance(k, str) and k[0] == "_": return False
            return True

        def _stringyfy(v):
            if isinstance(v, list):
                return [str(x) for x in v]
            elif isinstance(v, dict):
                return {k:_stringyfy(x) for k, x in v.items()}
            else:
                return str(v)
        with open(path, "w") as j:
            json.dump(_stringyfy({k:v for k, v in self.__dict__.items() if _can_save(k, v)}), j, indent=4)

@dataclass
class PipelineConfig:
    samples: list[str] = field(default_factory=lambda: list(DEFAULT_SAMPLES))
    threads: int = DEFAULT_THREADS
    reference: str|None = None
    reads_dir: str|None = None
    download: bool = True
    base_url: str = ENA_FASTQ_URL

    # fastp
    qualified_quality: int = 20
    unqualified_percent: int = 30
    n_base_limit: int = 5
    length_required: int = 50
    detect_adapter_for_pe: bool = True

    index_name: str = "hisat2_index"
    dpi: int = 150

    # yaml sections are flattened onto the fields above
    SECTIONS = {
        "download": {"base_url": "base_url", "enabled": "download"},
        "trim": {k: k for k in ["qualified_quality", "unqualified_percent", "n_base_limit", "length_required", "detect_adapter_for_pe"]},
        "align": {"index_name": "index_name"},
        "plot": {"dpi": "dpi"},
    }

    @classmethod
    def FromYaml(cls, path: str|Path):
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for k, v in raw.items():
            if k in cls.SECTIONS and isinstance(v, dict):
                for sk, sv in v.items():
                    if sk in cls.SECTIONS[k]: kwargs[cls.SECTIONS[k][sk]] = sv
            elif k in known:
                kwargs[k] = v
        if "samples" in kwargs:
            samples = kwargs["samples"]
            if isinstance(samples, (str, int)): samples = [samples]
            if not isinstance(samples, list) or any(isinstance(s, (list, dict)) or s is None for s in samples):
                raise TypeError(f"samples must be an accession or a list of accessions, got {samples!r}")
            kwargs["samples"] = [str(s) for s in samples]
        return cls(**kwargs)

    @classmethod
    def Parse(cls, args, on_error: Callable):
        """yaml config if given, then command line overrides"""
        model = cls()
        if args.config is not None:
            if not Path(args.config).exists():
                on_error(f"config [{args.config}] does not exist")
            else:
                try:
                    model = cls.FromYaml(args.config)
                except (yaml.YAMLError, TypeError) as e:
                    on_error(f"config [{args.config}] could not be read: {e}")

        if len(args.samples) > 0: model.samples = list(args.samples)
        if args.threads is not None: model.threads = args.threads
        if args.reference is not None: model.reference = args.reference
        if args.reads is not None: model.reads_dir = args.reads
        if args.no_download: model.download = False

        if model.reference is not None:
            model.reference = str(Path(model.reference).absolute())
        if model.reads_dir is not None:
            model.reads_dir = str(Path(model.reads_dir).absolute())
        if len(model.samples) == 0:
            on_error("no samples given")
        if len(set(model.samples)) != len(model.samples):
            on_error("sample accessions must be unique")
        try:
            model.threads = int(model.threads)
            if model.threads < 1:
                on_error("threads must be at least 1")
        except (TypeError, ValueError):
            on_error(f"threads must be an integer, got [{model.threads}]")
        return model

    def Save(self, path: str|Path, **extra):
        with open(path, "w") as j:
            json.dump(asdict(self)|extra, j, indent=4)

    @classmethod
    def Load(cls, path: str|Path):
        with open(path) as j:
            raw = json.load(j)
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in raw.items() if k in known})

@dataclass
class ReadsManifest(Saveable):
    samples: list[str]
    forward: list[Path]
    reverse: list[Path]

    RAW =       Path("internals/raw_reads.json")
    TRIMMED =   Path("internals/trimmed_reads.json")

    def Pairs(self):
        return list(zip(self.samples, self.forward, self.reverse))

    def AllReads(self):
        return [r for _, f, rv in self.Pairs() for r in (f, rv)]

    def Missing(self):
        return [p for p in self.AllReads() if not p.exists()]

    @classmethod
    def Expected(cls, samples: list[str], folder: Path, r1_pattern: str, r2_pattern: str):
        folder = Path(folder)
        return cls(
            samples=list(samples),
            forward=[folder.joinpath(r1_pattern.format(s=s)) for s in samples],
            reverse=[folder.joinpath(r2_pattern.format(s=s)) for s in samples],
        )

    @classmethod
    def Parse(cls, samples: list[str], folder: Path, r1_pattern: str, r2_pattern: str, on_error: Callable):
        model = cls.Expected(samples, folder, r1_pattern, r2_pattern)
        for s, f, r in model.Pairs():
            if f.exists() and r.exists(): continue
            on_error(f"missing reads for {s} in [{folder}]")
        return model

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            raw = json.load(j)
            return cls(
                samples=list(raw["samples"]),
                forward=[Path(p) for p in raw["forward"]],
                reverse=[Path(p) for p in raw["reverse"]],
            )

@dataclass
class Reference(Saveable):
    fasta: Path

    ARG_FILE = Path("internals/reference.json")

    @classmethod
    def Parse(cls, config: PipelineConfig, on_error: Callable):
        if config.reference is None:
            on_error("a reference fasta is required for alignment")
            return None
        fasta = Path(config.reference)
        if not fasta.exists():
            on_error(f"reference not found: [{fasta}]")
        elif cls.CountRecords(fasta) == 0:
            on_error(f"reference [{fasta}] has no fasta records")
        return cls(fasta)

    @classmethod
    def CountRecords(cls, fasta: Path):
        try:
            return sum(1 for _ in SeqIO.parse(fasta, "fasta"))
        except ValueError:
            return 0

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            return cls(Path(json.load(j)["fasta"]))

@dataclass
class FastqcReports(Saveable):
    reads: list[Path]
    data: list[Path] # fastqc_data.txt of each read file, same order
    multiqc: Path

    RAW =       Path("internals/fastqc_raw.json")
    TRIMMED =   Path("internals/fastqc_trimmed.json")

    def DataFor(self, read: Path):
        lookup = {r.name: d for r, d in zip(self.reads, self.data)}
        return lookup.get(Path(read).name)

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            raw = json.load(j)
            return cls(
                reads=[Path(p) for p in raw["reads"]],
                data=[Path(p) for p in raw["data"]],
                multiqc=Path(raw["multiqc"]),
            )

@dataclass
class FastpReports(Saveable):
    samples: list[str]
    json_reports: list[Path]
    html_reports: list[Path]

    MANIFEST = Path("internals/fastp_reports.json")

    def JsonFor(self, sample: str):
        return dict(zip(self.samples, self.json_reports)).get(sample)

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            raw = json.load(j)
            return cls(
                samples=list(raw["samples"]),
                json_reports=[Path(p) for p in raw["json_reports"]],
                html_reports=[Path(p) for p in raw["html_reports"]],
            )

@dataclass
class QCTables(Saveable):
    raw_counts: Path
    cleaning: Path

    MANIFEST = Path("internals/qc_tables.json")

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            raw = {k: Path(v) for k, v in json.load(j).items()}
            return cls(**raw)

@dataclass
class AlignmentManifest(Saveable):
    index: Path
    samples: list[str]
    bams: list[Path]
    flagstats: list[Path]

    MANIFEST = Path("internals/alignments.json")

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            raw = json.load(j)
            return cls(
                index=Path(raw["index"]),
                samples=list(raw["samples"]),
                bams=[Path(p) for p in raw["bams"]],
                flagstats=[Path(p) for p in raw["flagstats"]],
            )

@dataclass
class AlignmentSummary(Saveable):
    table: Path
    plots: list[Path]

    MANIFEST = Path("internals/alignment_summary.json")

    @classmethod
    def Load(cls, path):
        with open(path) as j:
            raw = json.load(j)
            return cls(Path(raw["table"]), [Path(p) for p in raw["plots"]])
