"""
Version is loaded from the version file without importing the package.
"""

import os
import sys
from setuptools import setup, find_packages

# load __version__ without importing anything
version_file = os.path.join(
    os.path.dirname(__file__),
    'wellvolume/version.py')
with open(version_file, 'r') as f:
    # use eval to get a clean string of version from file
    __version__ = eval(f.read().strip().split('=')[-1])

with open("README.md", "r") as f:
    long_description = f.read()

# everything needed to calculate volumes
requirements_default = set([
    'numpy',
    'pint',
    'pydantic>=2',
    'PyYAML',
    'setuptools',
])

# for running the tests
requirements_test = set([
    'pytest',
])

# if someone wants to output a requirements file
# `python setup.py --list-test > requirements.txt`
if '--list-test' in sys.argv:
    print('\n'.join(requirements_test))
    exit()

setup(
    name='wellvolume',
    version=__version__,
    description='Well bore geometry and fluid volume calculations',
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords=[
        'well',
        'wellbore',
        'casing',
        'liner',
        'drill pipe',
        'tubing',
        'annulus',
        'volume',
        'displacement',
        'drilling',
        'completion',
        'well engineering',
        'drilling engineering',
    ],
    license='Apache 2.0',
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Natural Language :: English',
        'Topic :: Scientific/Engineering',
    ],
    python_requires='>=3.9',
    packages=find_packages(exclude=["tests"]),
    package_data={
        'wellvolume': [
            'data/*.yaml',
        ]
    },
    install_requires=list(requirements_default),
    extras_require={
        'test': list(requirements_test),
    }
)
