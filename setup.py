from setuptools import setup, find_packages

setup(
    name="donor_registry",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["run"],
    install_requires=[
        "pandas>=1.3.0",
        "numpy>=1.20.0",
        "matplotlib>=3.4.0",
        "pyarrow>=6.0.0",  # For parquet support
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    description="A package for unifying donor records from intake units and finding compatible donors",
    keywords="bioinformatics, bone marrow, donor registry, record merging",
    python_requires=">=3.8",
)
