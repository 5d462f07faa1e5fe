"""
Setup script for tether-srs.

Tether SRS is the spaced-repetition scheduling engine of the Tether
learning platform. It serves three roles:

1. Interval Calculator - SM-2 review transitions for every item
2. Session Manager - Bounded, due-first study sessions with accuracy tracking
3. Planner - Session plans and study recommendations from deck state

The 'tether' command is a thin terminal front end over a JSON deck file.
"""

from setuptools import find_packages, setup

setup(
    name="tether-srs",
    version="1.0.0",
    description="Spaced-repetition scheduling engine - part of Tether",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Tether",
    packages=find_packages(include=["tether", "tether.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tether=tether.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition sm2 scheduling education",
)
