"""setuptools setup for RepTimer.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="RepTimer",
    version="0.1.0",
    description="Interval, head-to-head, stopwatch and breathing timer engine",
    packages=find_packages(include=["reptimer", "reptimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["reptimer=reptimer.__main__:main"],
    },
)
