from setuptools import find_packages, setup

setup(
    name="hookengine",
    version="0.1.0",
    description="In-process action/filter hook engine with priorities, wildcards and diagnostics",
    packages=find_packages(include=["hookengine", "hookengine.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0", "pytest-asyncio>=0.21"],
    },
    entry_points={"console_scripts": ["hookengine=hookengine.cli:main"]},
)
