from setuptools import find_packages, setup  # isort: skip


with open("README.md") as f:
    long_description = f.read()


setup(
    name="ddexport",
    version="0.1.0",
    description="Synchronous trace export transport to a co-located Datadog Agent",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="BSD-3-Clause",
    packages=find_packages(exclude=["tests*", "benchmarks*", "scripts*"]),
    package_data={"ddexport": ["py.typed"]},
    python_requires=">=3.8",
    zip_safe=False,
    install_requires=[
        "attrs>=20",
        "envier~=0.5",
        "msgpack>=1.0",
    ],
    extras_require={
        "tests": [
            "hypothesis",
            "mock",
            "pytest",
            "pytest-cov",
            "riot",
        ],
    },
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
