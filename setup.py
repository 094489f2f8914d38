"""
This script configures the installation of the 'scopelink' Python package using setuptools.
Defines the package metadata, dependencies, and entry points for the command-line interface (CLI).
The CLI command 'scopelink' is linked to the 'cli.scopelink' function, which inspects
component scopes on remote hosts over SSH (describe, list, show, search, fetch).

Run 'pip install -e .' to install the package in editable mode for development purposes.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="scopelink",
    version="0.1.0",
    description="Remote component scope client over SSH",
    long_description = long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["scopelink", "scopelink.*"]),
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.9',
    install_requires=[
        'omegaconf',
        'click',
        'rich',
        'paramiko',
        'pyyaml',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['scopelink=scopelink.cli:scopelink'],
    },
)
