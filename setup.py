"""Setup configuration for biblint."""

from setuptools import setup, find_packages

setup(
    name='biblint',
    version='0.4.0',
    description='Clean up, check and de-duplicate BibTeX files',
    author='Your Name',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'python-dotenv>=1.0.0',
        'PyYAML>=6.0',
        'click>=8.1.7',
        'colorama>=0.4.6',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'biblint=biblint.cli:main',
        ],
    },
)
