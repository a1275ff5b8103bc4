import os, sys
from pathlib import Path
HERE = Path(os.path.realpath(__file__)).parent
sys.path = [str(p) for p in set([
    HERE.joinpath("src")
]+sys.path)]
import setuptools
from qcalign.utils import USER, NAME, ENTRY_POINTS, VERSION
SHORT_SUMMARY = "Read QC, cleaning and HISAT2 alignment of paired-end sequencing runs"
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

if __name__ == "__main__":
    setuptools.setup(
        name=NAME,
        version=VERSION,
        author="BIFS619",
        description=SHORT_SUMMARY,
        long_description=long_description,
        long_description_content_type="text/markdown",
        url=f"https://github.com/{USER}/{NAME}",
        project_urls={
            "Bug Tracker": f"https://github.com/{USER}/{NAME}/issues",
        },
        classifiers=[
            "Programming Language :: Python :: 3",
            "Operating System :: Unix",
        ],
        package_dir={"": "src"},
        packages=setuptools.find_packages(where="src"),
        package_data={
            "":[ # "" is all packages
                "version.txt",
            ],
        },
        entry_points={
            'console_scripts': ENTRY_POINTS,
        },
        python_requires=">=3.10",
        # external tools (fastqc, multiqc, fastp, hisat2, samtools, wget) are expected on PATH
        install_requires=[
            "pandas",
            "numpy",
            "matplotlib",
            "biopython",
            "pyyaml",
        ],
        extras_require={
            "test": ["pytest"],
        },
    )
