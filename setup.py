from setuptools import setup, find_packages

setup(
    name="apiPerfBudget",
    version="0.1.0",
    description="Measure HTTP route latency and enforce percentile budgets in CI",
    packages=find_packages(include=["apiPerfBudget", "apiPerfBudget.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "requests>=2.31.0",
        "tabulate>=0.8.9",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests-mock>=1.11",
            "pytest-socket>=0.6",
        ],
    },
    entry_points={
        "console_scripts": ["apiPerfBudget=apiPerfBudget.cli.__main__:main"],
    },
    license="MIT",
)
