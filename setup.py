"""Setup configuration for ttl-cart-service project."""

from setuptools import setup, find_packages

setup(
    name="ttl-cart-service",
    version="1.0.0",
    description="Per-user shopping carts with time-bounded validity, served with FastAPI",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"services.cart_service": ["data/*.json"]},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "PyJWT>=2.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cart-service=services.cart_service.main:main",
        ],
    },
)
