from setuptools import setup, find_packages

setup(
    name="composable-state",
    version="0.1.0",
    description="Convergence protocol for composable, dependency-aware contract state",
    author="adamfilli",
    packages=find_packages(include=["composablestate", "composablestate.*"]),
    install_requires=[
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
