from setuptools import setup

with open("fastmile/version.py") as f:
    exec(f.read())

setup(
    name="python-fastmile",
    version=__version__,  # type: ignore # noqa: F821
    description="Python API for Nokia FastMile cellular gateways",
    url="https://github.com/python-fastmile/python-fastmile",
    author="",
    author_email="",
    license="GPLv3",
    packages=["fastmile", "fastmile.cli"],
    install_requires=[
        "aiohttp>=3.10",
        "asyncclick>=8.1.7",
        "mashumaro>=3.11",
        "orjson>=3.9",
        "rich>=13",
        "yarl>=1.9",
    ],
    extras_require={
        "test": [
            "pytest>=8",
            "pytest-asyncio>=0.23",
            "pytest-mock>=3.12",
        ],
    },
    python_requires=">=3.11",
    entry_points={"console_scripts": ["fastmile=fastmile.cli:cli"]},
    zip_safe=False,
)
