# setup.py - Pure Python package
from setuptools import setup, find_packages

setup(
    name="patricia-map",
    version="0.1.0",
    description="Mergeable persistent integer maps backed by Patricia trees",
    packages=find_packages(include=["patricia_map", "patricia_map.*"]),
    python_requires=">=3.8",
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
)
