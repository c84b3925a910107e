# coding: utf-8

"""Setup file for PyPI"""

from setuptools import setup, find_packages
from codecs import open
from os import path
import sys


here = path.abspath(path.dirname("__file__"))

with open(path.join(here, "DESCRIPTION.md"), encoding="utf-8") as description:
    long_description = description.read()

version = {}
with open(path.join(here, "Coordxref", "version.py")) as fp:
    exec(fp.read(), version)
version = version["__version__"]

if version is None:
    print("No version found, exiting", file=sys.stderr)
    sys.exit(1)

if sys.version_info.major != 3:
    raise EnvironmentError("""Coordxref is specifically programmed for python3,
    and is not compatible with Python2. Please upgrade your python before proceeding!""")

setup(
    name="coordxref",
    version=version,
    description="Coordinate-based cross-referencing of RefSeq models onto Ensembl transcripts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="LGPL3",
    tests_require=["pytest"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Operating System :: POSIX :: Linux",
        "Framework :: Pytest",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
    ],
    zip_safe=False,
    keywords="genomics annotation xref refseq ensembl",
    packages=find_packages(),
    entry_points={"console_scripts": ["coordxref = Coordxref.__main__:main"]},
    install_requires=[line.rstrip() for line in open(path.join(here, "requirements.txt"), "rt")
                      if line.strip()],
    extras_require={
        "postgresql": ["psycopg2"],
        "mysql": ["mysqlclient>=1.3.6"],
        "test": ["pytest"]
    },
    include_package_data=True
)
