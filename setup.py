from setuptools import setup, find_packages
from pathlib import Path

readme_path = Path(__file__).parent / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")
else:
    long_description = "Build, transform and validate JSON Schemas programmatically."

setup(
    name="schema_builder",
    version="0.1.0",
    description="Build, transform and validate JSON Schemas programmatically",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "jsonschema>=4.20.0",
        "referencing>=0.28.0",  # $ref registry for list validation
        "pyyaml>=6.0",  # YAML schema documents
        "fsspec>=2023.1.0",  # Remote schema documents (s3://, https://, memory://)
    ],
    extras_require={
        "dev": [
            "pytest",
            "coverage",
            "hypothesis",
        ],
        "storage-s3": ["s3fs"],
        "storage-gcs": ["gcsfs"],
        "storage-azure": ["adlfs"],
        "http": ["aiohttp"],  # https:// schema documents
    },
)
