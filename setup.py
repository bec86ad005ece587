"""
Setup configuration for annotator_core package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="annotator-core",
    version="0.1.0",
    author="vfrog",
    description="Coordinate transforms, annotation stores and undo history for image annotation tools",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.5.0",
        "numpy>=1.24.0",
        "opencv-python>=4.8.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
)
