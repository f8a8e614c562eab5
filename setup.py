from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="flowtrace",
    version="0.1.0",
    description="Maximum flow with a step-by-step trace for animated visualization.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"flowtrace.schemas": ["*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "networkx",
        "numpy",
        "PyYAML",
        "jsonschema",
        "matplotlib",
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={"console_scripts": ["flowtrace=flowtrace.cli:main"]},
)
