"""A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
"""
import os

from setuptools import find_packages, setup

# pylint: disable=redefined-builtin

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "README.rst"), encoding="utf-8") as fid:
    long_description = fid.read()

with open(os.path.join(here, "requirements.txt"), encoding="utf-8") as fid:
    install_requires = [line for line in fid.read().splitlines() if line.strip()]

setup(
    name="xmlexact",
    version="0.1.0",
    description="Map objects to XML and back guided by a definition.",
    long_description=long_description,
    author="xmlexact contributors",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    license="License :: OSI Approved :: MIT License",
    keywords="xml xsd serialization deserialization soap definition",
    packages=find_packages(exclude=["tests", "tests.*", "continuous_integration"]),
    install_requires=install_requires,
    extras_require={
        "dev": [
            "black==24.3.0",
            "mypy==1.5.1",
            "pylint==3.0.3",
            "coverage>=6.5.0,<7",
            "xmlschema>=3,<4",
        ],
    },
    package_data={"xmlexact": ["py.typed"]},
    data_files=[(".", ["README.rst", "requirements.txt"])],
)
