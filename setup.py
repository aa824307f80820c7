"""
selectkit - SELECT statement helpers for relational databases
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="selectkit",
    version="1.0.0",
    author="selectkit Contributors",
    description="Build, run and count SELECT statements from structured clauses",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["selectkit", "selectkit.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Database :: Front-Ends",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "duckdb": ["duckdb>=0.9.0"],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "selectkit=selectkit.cli:main",
        ],
    },
    keywords=[
        "sql",
        "select",
        "query-builder",
        "sqlite",
        "duckdb",
    ],
)
