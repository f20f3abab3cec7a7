from setuptools import setup, find_packages

setup(
    name="ihaperf_e2e",
    version="0.0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "playwright==1.52.0",
        "pydantic",
        "python-dotenv",
        "PyYAML",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires='>=3.10',
)
