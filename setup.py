#!/usr/bin/env python3
"""
Setup script for the Fingerspelling Recognition library
"""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def read_requirements():
    """Read runtime requirements from requirements.txt"""
    lines = (HERE / "requirements.txt").read_text().splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


setup(
    name="fingerspell",
    version="0.1.0",
    description="Real-time fingerspelling letter classification from tracked hand poses",
    long_description=(HERE / "README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["fingerspell", "fingerspell.*"]),
    package_data={"fingerspell": ["config.default.yaml"]},
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        "tracking": ["mediapipe>=0.10.0", "opencv-python>=4.8.0"],
        "test": ["pytest>=7.0"],
    },
)
