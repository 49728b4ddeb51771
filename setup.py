from setuptools import setup, find_packages

setup(
    name="rlematrix",
    version="1.0",
    description="Run-length encoded integer matrices and vectors with exact linear algebra",
    long_description=("Run-length encoded integer matrices and vectors for large, highly structured data, offering "
                      "arithmetic, slicing, Gauss-Jordan reduction, LU decomposition, solving and determinants "
                      "directly on the compressed representation"),
    long_description_content_type="text/plain",
    author="Philipp Schneider",
    author_email="zgddtgt@gmail.com",
    license="Apache License 2.0",
    python_requires=">=3.10",
    packages=find_packages(include=["rlematrix", "rlematrix.*"]),
    install_requires=["numpy"],
    extras_require={"test": ["pytest", "pytest-timeout", "scipy"]},
    classifiers=[
        "Intended Audience :: Science/Research", "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3.10", "Programming Language :: Python :: 3.11", "Programming Language :: Python :: 3.12",
        "Natural Language :: English", "Operating System :: OS Independent", "Topic :: Scientific/Engineering :: Mathematics"
    ],
    keywords=["run-length encoding", "integer matrix", "linear algebra", "gauss-jordan"],
    zip_safe=False,
)
