#!/usr/bin/env python3
#
# ArcClimate
#

from setuptools import setup
from os import path
from io import open

package = 'arcclimate'

description = 'Python library to create site weather in Japan from MSM grid-point data.'

requirements = [
    'requests',
    'numpy',
    'pandas',
    'matplotlib',
]

extras = {
    'test': ['pytest'],
}

here = path.abspath(path.dirname(__file__))

# Set the long description from the README file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Set version
__version__ = None
with open(path.join(here, package, '__init__.py'), encoding='utf-8') as f:
    for line in f:
        if line.startswith('__version__'):
            exec(line.strip())
            break

setup(
    name=package,
    version=__version__,
    description=description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords='weather climate msm solar irradiance',
    packages=[package],
    scripts=['bin/arcclimate_site.py'],
    install_requires=requirements,
    extras_require=extras,
    license='MIT',
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Development Status :: 4 - Beta",
        "Topic :: Scientific/Engineering :: Atmospheric Science",
    ]
)
