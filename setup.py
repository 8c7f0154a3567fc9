from setuptools import setup, find_packages

setup(
    name="test-impact-analyzer",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "gitpython>=3.1.0",
        "python-dotenv>=1.0.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-javascript>=0.23.0",
        "tree-sitter-typescript>=0.23.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0.0",
            "black>=20.8b1",
            "isort>=5.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "testimpact=testimpact.cli:main",
        ]
    },
    description="Selects the tests affected by a change in a JavaScript or TypeScript project",
    keywords="testing, dependency graph, impact analysis, javascript, typescript",
)
