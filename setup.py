from setuptools import setup, find_packages

setup(
    name="tracealign",
    version="0.1.0",
    description="Find primers, vectors and adapters in sequencing reads by quality-weighted alignment",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "dnaio>=1.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={"console_scripts": ["tracealign = tracealign.cli:main_cli"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
