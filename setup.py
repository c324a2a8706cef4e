from setuptools import find_packages, setup

with open("eth2fuzz/VERSION.txt") as f:
    spec_version = f.read().strip()

setup(
    name="eth2fuzz",
    version=spec_version,
    description="Valid operation corpus generator for eth2 state transition fuzzing",
    include_package_data=False,
    package_data={
        "configs": ["*.yaml"],
        "eth2fuzz": ["VERSION.txt"],
    },
    package_dir={
        "configs": "configs",
    },
    packages=find_packages(include=["eth2fuzz", "eth2fuzz.*"]) + ["configs"],
    python_requires=">=3.9, <4",
    install_requires=[
        "eth-utils>=2.0.0",
        "lru-dict>=1.1.6",
        "py_ecc>=6.0.0",
        "python-snappy>=0.6.1",
        "remerkleable>=0.1.27",
        "rich>=13.0.0",
        "ruamel.yaml>=0.17.21",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "eth2fuzz-corpus=eth2fuzz.corpus.runner:main",
        ],
    },
)
