# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

import os
import sys

if sys.version_info < (3, 7):
    raise SystemExit("couchcast requires Python 3.7 or later.")

from setuptools import setup, find_packages

# open version module
version = {}
with open(os.path.join("couchcast", "version.py")) as f:
    exec(f.read(), version)

with open(os.path.join(os.path.dirname(__file__), 'README.rst')) as f:
    long_description = f.read()


setup(
    name = 'couchcast',
    version = version['__version__'],

    description = 'Casted models for CouchDB documents',
    long_description = long_description,
    license = 'MIT',

    classifiers = [
        'Development Status :: 4 - Beta',
        'Environment :: Other Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Database',
        'Topic :: Utilities',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    packages = find_packages(exclude=['tests']),

    zip_safe = False,

    install_requires = [
        'requests>=2.20',
        'simplejson',
        'jsonobject>=2.0',
    ],

    extras_require = {
        'test': ['pytest'],
    },
)
