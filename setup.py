from setuptools import setup, find_packages

setup(
    name="etf-option-pricer",
    version="1.0",
    packages=find_packages(include=["etf_pricer", "etf_pricer.*"]),
    install_requires=[
        "fastapi>=0.104.1",
        "uvicorn>=0.24.0",
        "numpy>=1.24.3",
        "pandas>=2.0.3",
        "requests>=2.31.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.3",
            "scipy>=1.11.4",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "etf-pricer=etf_pricer.main:main",
        ],
    },
    python_requires=">=3.9",
)
