from setuptools import setup, find_packages

setup(
    name="dtlayout",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "dtlayout.emit": ["templates/*.j2"],
    },
    entry_points={
        'console_scripts': [
            'dtlayout=dtlayout.cli:main',
        ],
    },
    install_requires=[
        "pydevicetree>=0.0.12",
        "pyparsing>=2.4",
        "Jinja2>=3.0",
        "pyelftools>=0.29",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    author="dtlayout",
    description="Firmware memory layout resolution from devicetree hardware descriptions",
)
