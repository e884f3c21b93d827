# setup.py
from setuptools import setup, find_packages

setup(
    name="email_scout",
    version="0.1.0",
    description="Scrape email addresses from a webpage or a whole website",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        # playwright and pyppeteer pin incompatible pyee releases, install one of them
        "browser": ["playwright>=1.40"],
        "pyppeteer": ["pyppeteer>=1.0"],
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "email-scout=email_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
