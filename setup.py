from setuptools import setup, find_packages

setup(
    name="connect4sim",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "filelock",  # Locking for corpus files
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect4sim=connect4sim.interfaces.cli:main",
        ],
    },
)
