"""
setup.py (editable-install helper)
---------------------------------
Packaging entry point for `pip install -e .` (src layout).
"""

from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).resolve().parent
README = (ROOT / "README.md").read_text(encoding="utf-8")

setup(
    # ------------------------------------------------------------------
    # Core metadata
    # ------------------------------------------------------------------
    name="gridfit",
    version="0.1.0",
    description="Grid-point curve and surface fitting: cubic splines, extrapolation and 2-D composition",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Your-Desk-Quant-Team",
    license="MIT",
    python_requires=">=3.11",

    # ------------------------------------------------------------------
    # Package discovery – src layout
    # ------------------------------------------------------------------
    package_dir={"": "src"},
    packages=find_packages(where="src", exclude=("tests", "notebooks")),
    include_package_data=True,

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------
    install_requires=[
        "numpy>=1.26",
        "scipy>=1.11",
        "numba>=0.59",
        "matplotlib>=3.8",
        "pandas>=2.2",
        "pyyaml>=6.0",
        "tqdm>=4.66",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
        "dev": [
            "pytest>=8.0",
            "ruff>=0.3",
            "black>=24.3",
            "ipython",
        ],
    },

    # ------------------------------------------------------------------
    # Trove classifiers
    # ------------------------------------------------------------------
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Operating System :: OS Independent",
    ],

    entry_points={
        "console_scripts": [
            "gridfit-evaluate = gridfit.cli.evaluate:main",
        ],
    },

    zip_safe=False,
)
