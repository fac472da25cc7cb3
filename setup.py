"""Setup script for the meteolink package."""

from setuptools import find_packages, setup

setup(
    name="meteolink",
    version="0.1.0",
    description="Weather transmitter ingestion, rain accumulation and MQTT bridge",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "paho-mqtt>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "meteolink-bridge=meteolink.bridge:main",
        ],
    },
)
