#!/usr/bin/env python3

import builtins

from setuptools import setup

# skip the heavy imports in pyssid/__init__.py
builtins._PYSSID_SETUP_ = True
from pyssid import __version__

def readme():
    with open('README.org') as f:
        return f.read()


setup(name='pyssid',
      version=__version__,
      description='Subspace and realization identification of linear '
      'state-space models',
      long_description=readme(),
      classifiers=[],
      keywords=['subspace','identification','n4sid','era','okid',
                'state-space'],
      license='BSD',
      packages=['pyssid', 'pyssid.utils'],
      package_data={'pyssid': ['utils/ssidrc']},
      zip_safe=False,
      install_requires=[
          'numpy',
          'scipy'],
      extras_require={
          'tests': [
              'pytest'
          ]}
)
