from setuptools import find_namespace_packages, setup

setup(
    name="hql-reader",
    version="0.1.0",
    description="Lexer and reader for the HQL language",
    packages=find_namespace_packages(include=["hql", "hql.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest"],
    },
)
