#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re

from setuptools import find_packages, setup

# XXX: importing bx would require its dependencies to be installed already
with open('bx/version.py') as fp:
    match = re.search(r"^__version__ = '([^']+)'", fp.read(), re.MULTILINE)
assert match is not None, '__version__ not found in bx/version.py'

setup(
    name='bx',
    version=match.group(1),
    description='Zero-copy typed bencode decoder',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    entry_points={
        'console_scripts': ['bx-decode=bx.cli.decode:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.11',
    packages=find_packages(exclude=('bx_tests', 'bx_tests.*')),
    install_requires=[
        'configargparse',
        'pydantic>=2',
        'sortedcontainers',
        'structlog',
        'typing_extensions>=4.6',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
