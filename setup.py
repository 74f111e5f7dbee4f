from setuptools import setup, find_namespace_packages

setup(
    name="mwstack",
    version="0.1.0",
    packages=find_namespace_packages(where="src", include=["mwstack", "mwstack.*"]),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "click>=8.0",
        "tenacity>=8.0",
        "python-dotenv>=1.0",
        "jinja2>=3.0",
        "rich>=13.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mwstack=mwstack.CLI.main:main",
        ],
    },
)
