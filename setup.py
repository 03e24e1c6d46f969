from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup  # type: ignore


ROOT = Path(__file__).resolve().parent


def _read_version() -> str:
    """Read `__version__` without importing the package (its deps may be missing)."""

    scope: dict[str, str] = {}
    exec((ROOT / "src" / "soulbounds" / "_version.py").read_text(encoding="utf-8"), scope)
    return scope["__version__"]


setup(
    name="soulbounds",
    version=_read_version(),
    description="Non-transferable identity registry with allow-listed metadata, served over HTTP",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "httpx>=0.27",
    ],
    extras_require={
        "test": [
            "pytest>=8",
        ],
    },
    entry_points={
        "console_scripts": [
            "soulbounds=soulbounds.__main__:main",
        ],
    },
)
