"""Setup script for the hostprobe package."""

from setuptools import find_packages, setup

setup(
    name="hostprobe",
    version="0.1.0",
    description="Host metrics probe - reports CPU, memory, network and load to a collection server",
    author="hostprobe developers",
    packages=find_packages(include=["hostprobe", "hostprobe.*"]),
    install_requires=[
        "click>=8.1.7",
        "httpx>=0.26.0",
        "psutil>=5.9.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "structlog>=24.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hostprobe=hostprobe.main:main",
        ],
    },
    python_requires=">=3.10",
)
