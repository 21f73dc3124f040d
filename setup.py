import setuptools

CORE_REQUIRES = [
    "numpy", "nptyping",
    "numba",
]
TEST_REQUIRES = [
    # testing and coverage
    'pytest', 'coverage', 'pytest-cov',
]

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="ndlattice",
    version="0.0.1",
    description="Multi-dimensional arrays with strided views and delayed, "
                "on-demand elementwise expressions.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=setuptools.find_packages(include=["ndlattice", "ndlattice.*"]),
    python_requires=">=3.9",
    install_requires=CORE_REQUIRES,
    extras_require={"test": TEST_REQUIRES},
)
