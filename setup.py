#!/usr/bin/env python3
"""
Setup script for rnamatch
"""

from setuptools import setup, find_packages

setup(
    name="rnamatch",
    version="0.1.0",
    description="Find protein-coding regions in assembled RNA and anchor them on a reference genome",
    packages=find_packages(include=["rnamatch", "rnamatch.*"]),
    package_data={
        "rnamatch.tests": ["data/*"],
    },
    install_requires=[
        "pyyaml>=6.0",
        "biopython>=1.79",
        "pandas>=1.4.0",
        "Levenshtein>=0.20.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'rnamatch=rnamatch.cli.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
)
