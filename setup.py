"""
scaffoldgen - CRUD boilerplate generator for Laravel APIs
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="scaffoldgen",
    version="0.1.0",
    author="scaffoldgen contributors",
    author_email="",
    description="⚡ Generate Laravel form requests, resources and routes from column lists",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["scaffoldgen", "scaffoldgen.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "scaffoldgen=scaffoldgen.__main__:main",
        ],
    },
    keywords="laravel, generator, scaffolding, crud, code-generator, php",
)
