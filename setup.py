from setuptools import setup, find_packages

setup(
    name="powerfour",
    version="0.1.0",
    description="Connect Four with power-ups and a one-time board expansion",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",  # Reinforcement learning environment interface
    ],
    extras_require={
        "tests": ["pytest"],
    },
)
