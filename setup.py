from setuptools import setup, find_packages

setup(
    name="flowsim",
    version="0.1.0",
    description="Discrete event simulation kernel with generator, queue and server components",
    author="flowsim Team",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    py_modules=["run_simulation"],
    package_data={"configs": ["*.yaml"]},
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "pyyaml>=6.0",
        "matplotlib>=3.7.0",
        "seaborn>=0.12.0",
        "tqdm>=4.65.0",
        "dataclasses-json>=0.6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
