from setuptools import setup, find_packages

setup(
    name="indicatorsnet",
    version="0.1.0",
    description="A library for spatial indicator computation and aggregation across spatial units.",
    author="Your Name",
    author_email="your.email@example.com",
    packages=find_packages(include=["indicatorsnet", "indicatorsnet.*"]),
    install_requires=[
        "pandas",
        "numpy",
        "geopandas>=1.0",
        "shapely>=2.0",
        "pyproj",
        "pandera[geopandas]",
        "pydantic>=2",
        "loguru",
        "tqdm",
        "httpx",
    ],
    extras_require={"test": ["pytest"]},
    include_package_data=True,
)
