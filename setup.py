#!/usr/bin/env python
"""Setup configuration for Productivity Archive."""

from setuptools import find_packages, setup

setup(
    name="productivity-archive",
    version="0.1.0",
    packages=find_packages(include=["productivity_archive", "productivity_archive.*"]),
    py_modules=["app"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.104.1",
        "uvicorn[standard]>=0.24.0",
        "pydantic>=2.5.0",
        "sqlalchemy>=2.0.23",
        "httpx>=0.25.0",
        "alembic>=1.12.0",
        "pydantic-settings>=2.0.0",
        "structlog>=23.2.0",
        "python-dateutil>=2.8.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "productivity-archive=app:main",
        ],
    },
)
