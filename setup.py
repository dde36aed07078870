"""
Setup script for pdfsplice.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

test_requirements = [
    "pytest>=7.0.0",
    "pytest-cov>=4.0.0",
]

setup(
    name="pdfsplice",
    version="0.1.0",
    description="Append the exercise sheets cited by a weekly colle program to the program PDF",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="pdfsplice Contributors",
    author_email="",
    packages=find_packages(include=["pdfsplice", "pdfsplice.*"]),
    install_requires=[
        "pypdf>=6.20.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "requests>=2.28.0",
    ],
    extras_require={
        "test": test_requirements,
        "dev": test_requirements,
    },
    entry_points={
        "console_scripts": [
            "pdfsplice=pdfsplice.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Intended Audience :: Developers",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf merge graft pages exercises colle cli",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
