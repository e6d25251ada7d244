from __future__ import annotations

from setuptools import find_packages, setup  # type: ignore


setup(
    name="fleetcast",
    version="0.1.0",
    description="Live car location registry with push-channel fan-out and HTTP polling",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "fastapi>=0.100",
        "uvicorn[standard]>=0.23",
        "numpy>=1.24",
        "httpx>=0.24",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "fleetcast=fleetcast.__main__:main",
        ],
    },
)
