from setuptools import setup, find_packages

setup(
    name="cap-height",
    version="0.1.0",
    description="To measure the cap-height ratio of fonts by rasterizing sample text",
    packages=find_packages(include=["capheight", "capheight.*"]),
    python_requires=">=3.11",
    install_requires=[
        "matplotlib>=3.7",
        "numpy>=1.24",
        "Pillow>=10.1",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    tests_require=["pytest"],
    entry_points={
        "console_scripts": ["capheight=capheight.cli:main"],
    },
)
