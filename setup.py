from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="cadence-cli",
    version="0.3.0",
    author="Cadence Contributors",
    description="Heuristic detection of AI-generated commits in Git repositories.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "typer>=0.12.3",
        "rich>=13.7.1",
        "gitpython>=3.1.43",
        "plotille>=5.0.0",
        "pyfiglet>=1.0.2",
        "python-dotenv",
        "pyyaml>=6.0",
        "httpx>=0.27.0",
        "beautifulsoup4>=4.12.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.29.0",
        "anthropic",
        "openai>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cadence=cadence_cli.main:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    python_requires=">=3.9",
)
