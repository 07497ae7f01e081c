# setup.py
from setuptools import setup, find_packages

setup(
    name="crawl_scout",
    version="0.1.0",
    description="Bounded breadth-first crawler and page scraper with an HTTP API",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"crawl_scout.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=4.9",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["crawl-scout=crawl_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
