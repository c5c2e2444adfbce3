"""
Optionscope Package Setup
=========================
Option pricing and multi-leg strategy analytics package for pip installation.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "readme.md").read_text(encoding='utf-8')

setup(
    name="optionscope",
    version="0.1.0",
    author="",
    author_email="",
    description="Black-Scholes pricing, Greeks, payoff curves and strategy risk metrics for equity options",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "*.tests", "*.tests.*", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Financial and Insurance Industry",
        "Topic :: Office/Business :: Financial :: Investment",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        # Core dependencies
        "pandas>=1.3.0,<3",
        "numpy>=1.21.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.2.0",
            "scipy>=1.7.0",
        ],
        "dev": [
            "pytest>=6.2.0",
            "scipy>=1.7.0",
            "black>=21.0",
            "flake8>=3.9.0",
        ],
    },
    include_package_data=True,
)
