from setuptools import setup, find_packages

setup(
    name="lodexplorer",
    version="0.1.0",
    description="Linked Data resource exploration engine and HTTP API",
    author="Your Name",
    author_email="you@example.com",
    packages=find_packages(include=["lodexplorer", "lodexplorer.*", "service", "service.*"]),
    package_data={
        "lodexplorer": ["config/*.yml", "kg/queries/*.rq", "kg/queries/*.json"]
    },
    install_requires=[
        "click>=8.0",
        "fastapi>=0.85.0",
        "starlette<1.0",
        "pydantic",
        "httpx>=0.24",
        "rdflib>=6.0",
        "PyYAML>=6.0",
        "uvicorn>=0.20",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["lodexplorer=lodexplorer.cli.__main__:main"],
    },
    python_requires=">=3.10",
    license="MIT",
)
