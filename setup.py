"""
lispwat Package Setup

Install with: pip install -e .
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding='utf-8')

setup(
    name="lispwat",
    version="0.1.0",
    author="lispwat Team",
    description="S-expression language compiler targeting WebAssembly text",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["lispwat", "lispwat.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
        "click>=8.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "black>=22.0",
            "mypy>=0.900",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Compilers",
    ],
    keywords="lisp, s-expression, webassembly, wat, wasi, compiler",
    entry_points={
        "console_scripts": [
            "lispwat=lispwat.cli:main",
        ],
    },
)
