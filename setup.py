from setuptools import setup, find_packages

setup(
    name="coursekit",
    version="0.1.0",
    description="Coursekit - runtime and dry-run analyzer for declarative interactive courses",
    author="Your Name",
    packages=find_packages(include=["coursekit_core", "coursekit_core.*", "coursekit_engine", "coursekit_engine.*"]),
    include_package_data=True,
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # Scene graph analysis (dry runs)
        "networkx>=3.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",

        # YAML course documents
        "pyyaml>=6.0.0",

        # Jinja2 for the dry-run report template
        "jinja2>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "coursekit = coursekit_engine.cli:main",
        ],
    },
    python_requires=">=3.10",
    package_dir={"": "."},
)
