from setuptools import setup, find_packages
import pathlib


here = pathlib.Path(__file__).parent.resolve()
long_description = (here / 'README.md').read_text(encoding='utf-8')

setup(
    name="chronosca",
    version="0.1.0",
    author="Chronologue",
    description="Sound change rule engine for constructed languages",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Text Processing :: Linguistic",
    ],
    packages=find_packages(include=["chronosca", "chronosca.*"]),
    python_requires=">=3.8",
    install_requires=['schema', 'click', 'regex', 'pandas', 'pandera'],
    extras_require={
        'dev': ['pytest', 'pytest-cov', 'pylint', 'mypy'],
    },
    entry_points={
        'console_scripts': ['chronosca=chronosca.chronosca:main'],
    },
)
