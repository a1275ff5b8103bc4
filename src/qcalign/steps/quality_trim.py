import os
from ..constants import TRIM_FOLDER, TRIMMED_R1, TRIMMED_R2
from ..models import FastpReports, ReadsManifest
from .common import Init, RequireFiles

def Procedure(args):
    C = Init(args, __file__)
    man = ReadsManifest.Load(C.NextArg())
    conf = C.config
    RequireFiles(C, man.AllReads(), "raw reads")

    out_dir = C.root_workspace.joinpath(TRIM_FOLDER)
    os.makedirs(out_dir, exist_ok=True)
    trimmed = ReadsManifest.Expected(man.samples, out_dir, TRIMMED_R1, TRIMMED_R2)
    adapters = "--detect_adapter_for_pe" if conf.detect_adapter_for_pe else ""

    json_reports, html_reports = [], []
    for i, ((s, f, r), (_, tf, tr)) in enumerate(zip(man.Pairs(), trimmed.Pairs())):
        C.log.info(f">>> fastp {i+1} of {len(man.samples)}: {s}")
        js, html = out_dir.joinpath(f"{s}_fastp.json"), out_dir.joinpath(f"{s}_fastp.html")
        C.shell(f"""\
            fastp \
                -i {f} -I {r} \
                -o {tf} -O {tr} \
                -q {conf.qualified_quality} -u {conf.unqualified_percent} \
                -n {conf.n_base_limit} -l {conf.length_required} \
                {adapters} \
                -w {C.threads} \
                --html {html} --json {js}
        """)
        json_reports.append(js)
        html_reports.append(html)

    C.log.info(f"trimmed {len(man.samples)} read pairs")
    trimmed.Save(C.root_workspace.joinpath(ReadsManifest.TRIMMED))
    FastpReports(man.samples, json_reports, html_reports).Save(C.expected_output)
