#!/usr/bin/env python
from setuptools import setup
setup(
    name='paceobjects',
    version='1.0.0',
    description='an active-record mapping for the Pace object web service',
    author='paceobjects contributors',

    packages=['paceobjects'],
    provides=['paceobjects'],
    python_requires='>=3.8',
    install_requires=[
        'simplejson>=3.0',
        'httplib2>=0.19',
        'inflection>=0.5',
    ],
    extras_require={
        'test': ['mock>=4.0', 'pytest'],
    },
)
