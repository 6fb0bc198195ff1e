"""Setup script for Blueprint."""

from setuptools import find_packages, setup

setup(
    name="site-blueprint",
    version="0.1.0",
    description="Declarative export and import of site configuration",
    author="Blueprint Team",
    packages=find_packages(include=["blueprint", "blueprint.*"]),
    install_requires=[
        "duckdb>=1.2.0",  # Reference site storage and runSql engine
        "jsonschema>=4.0.0",  # Step payload validation
        "typer>=0.9.0",  # CLI framework
        "rich>=13.0.0",  # CLI output
        "pyyaml>=6.0",  # Profile handling
    ],
    package_data={
        "blueprint": ["py.typed"],
    },
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.1.0",
            "black>=22.1.0",
            "isort>=5.10.1",
            "flake8>=4.0.1",
            "mypy>=1.0.0",  # Type checking
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.1.0",
            "mock>=5.0.0",  # For mocking in tests
        ],
    },
    entry_points={
        "console_scripts": [
            "blueprint=blueprint.cli.main:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
