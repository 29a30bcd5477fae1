# setup.py
from setuptools import setup, find_packages

setup(
    name="crawl_scout",
    version="0.1.0",
    description="Bounded-depth concurrent web crawler and image downloader",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"crawl_scout": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.0",
        "Jinja2>=3.1",
        "pydantic>=2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "crawl_scout=crawl_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
