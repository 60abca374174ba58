"""Setup configuration for the GoMarketplace cart store."""

from setuptools import setup, find_packages

setup(
    name="gomarketplace-cart",
    version="1.0.0",
    description="Shopping cart state store with Redis-backed snapshot persistence",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "redis>=5.0.1",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
)
