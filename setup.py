"""
Setup script for jsonsalvage
"""

from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", encoding="utf-8") as fh:
    requirements = [
        line.strip() for line in fh if line.strip() and not line.startswith("#")
    ]

setup(
    name="jsonsalvage",
    version="0.1.0",
    description="Recover structured JSON from free-form AI model output",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["jsonsalvage", "jsonsalvage.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={"test": ["pytest>=7.0"]},
)
