# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="amalgen",
    version="1.0.0",
    description="Single-file amalgamation generator for C libraries distributed as tarballs",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["amalgen*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'amalgen=amalgen.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
