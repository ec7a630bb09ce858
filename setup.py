from setuptools import setup, find_packages

setup(
    name="streamcount",
    version="0.1.0",
    description="Streaming distinct-count estimation with the CVM sample-and-halve algorithm",
    author="adamfilli",
    packages=find_packages(include=["streamcount", "streamcount.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "streamcount=streamcount.cli:main",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
