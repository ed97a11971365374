import pathlib
import re

import setuptools


setuptools.setup(
    name="poddoctor",
    version="0.3.0",
    description="POD (Plain Old Documentation) to HTML documentation generator.",
    long_description=re.sub(
        pattern="(?ms)^.. description-end.*",
        repl="",
        string=pathlib.Path("README.rst").read_text(encoding="utf-8"),
        count=1,
    ),
    long_description_content_type="text/x-rst",
    license="MIT/X11",
    python_requires=">=3.8",
    packages=setuptools.find_packages(include=["poddoctor", "poddoctor.*"]),
    install_requires=[
        "Twisted",
        "attrs",
        "configargparse",
        "toml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "poddoctor = poddoctor.driver:main",
        ],
    },
)
