from setuptools import setup, find_packages

setup(
    name="neophyte",
    version="0.1.0",
    description="neophyte - RPC client for driving the neophyte host",
    author="neophyte Team",
    packages=find_packages(include=["neophyte", "neophyte.*"]),
    install_requires=[
        "pyzmq>=24.0.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    entry_points={
        "console_scripts": [
            "neophyte=neophyte.cli:main",
        ],
    },
    python_requires=">=3.9",
)
