#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import setup
import os
import io
import sys


CURRENT_PYTHON = sys.version_info[:2]
REQUIRED_PYTHON = (3, 8)

if CURRENT_PYTHON < REQUIRED_PYTHON:
    sys.stderr.write("""
==========================
Unsupported Python version
==========================
This version of rca-learn requires Python {}.{}, but you're trying to
install it on Python {}.{}.
This may be because you are using a version of pip that doesn't
understand the python_requires classifier. Make sure you
have pip >= 9.0 and setuptools >= 24.2, then try again:
    $ python -m pip install --upgrade pip setuptools
    $ python -m pip install rca-learn
""".format(*(REQUIRED_PYTHON + CURRENT_PYTHON)))
    sys.exit(1)


version = {}
with io.open(os.path.join('rca_learn', '_version.py')) as fp:
  exec(fp.read(), version)

# Get the long description from README.rst
with io.open('README.rst', encoding='utf-8') as f:
  long_description = f.read()

setup(name='rca-learn',
      version=version['__version__'],
      description=('Relevant Components Analysis: metric learning from '
                   'chunklets of equivalent points'),
      long_description=long_description,
      long_description_content_type='text/x-rst',
      python_requires='>={}.{}'.format(*REQUIRED_PYTHON),
      license='MIT',
      classifiers=[
          'Development Status :: 4 - Beta',
          'License :: OSI Approved :: MIT License',
          'Programming Language :: Python :: 3',
          'Operating System :: OS Independent',
          'Intended Audience :: Science/Research',
          'Topic :: Scientific/Engineering'
      ],
      packages=['rca_learn'],
      install_requires=[
          'numpy',
          'scipy',
          'scikit-learn>=1.0',
      ],
      extras_require=dict(
          test=['pytest'],
          bench=['asv'],
      ),
      test_suite='test',
      keywords=[
          'Metric Learning',
          'Relevant Components Analysis',
          'Mahalanobis Metric',
          'Whitening',
          'Chunklets'
      ])
