"""
setup.py

Packaging metadata and CLI entry point for voice-relay.

Version: 0.3.0: adds the OCI speech provider with staged object storage and
job polling, and the `providers` CLI subcommand.
"""
from setuptools import setup, find_packages

setup(
    name="voice-relay",
    version="0.3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pydantic>=2.0",
        "ffmpeg-python",
        "pyyaml",
        "python-dotenv",
        "fastapi",
        "uvicorn",
        "python-multipart",
        "httpx",
        "groq",
        "huggingface_hub[inference]",
        "google-cloud-speech",
        "google-cloud-translate",
        "oci",
        "replicate",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "voice-relay=cli:cli",
        ],
    },
    python_requires=">=3.9",
)
