from setuptools import setup, find_packages

setup(
    name="uiauto-ax",
    version="1.0.0",
    packages=find_packages(include=["uiauto_ax", "uiauto_ax.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uiauto_ax": ["schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uiauto-ax=uiauto_ax.cli:main",
        ],
    },
)
