from setuptools import setup, find_packages

setup(
    name="pureblake2s",
    version="0.1.0",
    description="Pure-Python BLAKE2s hashing with one-shot, streaming and keyed (MAC) modes, plus helpers for hashing pandas, pyarrow and polars columns.",
    long_description=open("Readme.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    include_package_data=True,
    install_requires=[],
    extras_require={
        "dataframes": ["pandas"],
        "arrow": ["pyarrow"],
        "polars": ["polars"],
        "test": ["pytest"],
    },
    python_requires=">=3.7",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Security :: Cryptography",
        "Operating System :: OS Independent",
    ],
    zip_safe=False,
)
