"""
querytrace - Trace spans for completed database queries

Turns a completed query's timing breakdown into a query span with queue,
execution and decode children.
"""

import os
import re
from setuptools import setup, find_packages

# Read the README for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Get package version
with open(os.path.join("querytrace", "__init__.py"), "r", encoding="utf-8") as f:
    version_match = re.search(r'^__version__ = ["\']([^\"\']+)[\"\']', f.read(), re.MULTILINE)
    if version_match:
        VERSION = version_match.group(1)
    else:
        raise RuntimeError("Unable to find version string in querytrace/__init__.py")

# Core dependencies
install_requires = [
    "attrs>=22.2.0",
    "opentelemetry-api>=1.20.0",
]

# Optional dependencies
extras_require = {
    "sdk": ["opentelemetry-sdk>=1.20.0"],

    # Development and testing
    "test": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
        "opentelemetry-sdk>=1.20.0",
    ],
    "dev": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
        "opentelemetry-sdk>=1.20.0",
        "black>=22.0.0",
        "isort>=5.0.0",
        "mypy>=0.990",
    ],
}

setup(
    name="querytrace",
    version=VERSION,
    author="querytrace contributors",
    description="Trace spans for completed database queries",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    package_data={
        "querytrace": ["py.typed"],
    },
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: System :: Monitoring",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Typing :: Typed",
    ],
    keywords=[
        "tracing",
        "opentelemetry",
        "database",
        "sql",
        "spans",
        "observability",
    ],
    zip_safe=False,
)
