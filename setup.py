import re

from setuptools import setup, find_packages

with open("src/pepolicy/__init__.py") as f:
    version = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M).group(1)

with open("README.rst") as f:
    long_description = f.read()

setup(
    name="pepolicy",
    version=version,
    description="Classify paired-end alignments and compute opposite-mate search windows",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "dnaio>=1.0",
        "xopen>=1.6",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={"console_scripts": ["pepolicy = pepolicy.cli:main_cli"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
