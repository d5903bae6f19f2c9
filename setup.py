"""
Setup script for colmat

This setup.py is primarily for compatibility. The main configuration is in
pyproject.toml; this script only reads the version and long description so
that legacy ``python setup.py`` invocations keep working.
"""

from pathlib import Path
from setuptools import setup


# Read version from src/colmat/__init__.py
def get_version():
    version_file = Path("src/colmat/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    version=get_version(),
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
)
