"""
Setup script for Harmonizer, the release metadata lookup tool
"""

import re
from pathlib import Path

from setuptools import setup, find_packages

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Single source for the version, without importing the package
config_source = (this_directory / "src" / "harmonizer" / "core" / "config.py").read_text(encoding="utf-8")
version = re.search(r'^PROJECT_VERSION = "([^"]+)"', config_source, re.MULTILINE).group(1)

setup(
    name="harmonizer",
    version=version,
    author="Harmonizer Team",
    author_email="contact@example.com",
    description="Look up a music release on several metadata providers and merge the results",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.25.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "black>=21.0",
            "flake8>=3.8",
            "mypy>=0.800",
        ],
    },
    entry_points={
        "console_scripts": [
            "harmonizer=harmonizer.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Database :: Front-Ends",
    ],
    zip_safe=False,
)
