#!/usr/bin/env python

import io
from os.path import exists

from setuptools import setup

__version__ = "1.0.0"

setup(
    name='django-search-path',
    version=__version__,
    packages=[
        'django_search_path',
        'django_search_path.postgresql_backend',
        'django_search_path.tests',
    ],
    include_package_data=True,
    scripts=[],
    license='MIT',
    description='Nested, per thread and per task control of the PostgreSQL search_path for Django.',
    long_description=io.open('README.rst', encoding='utf-8').read() if exists("README.rst") else "",
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Environment :: Web Environment',
        'License :: OSI Approved :: MIT License',
        'Framework :: Django',
        'Framework :: Django :: 4.2',
        'Framework :: Django :: 5.0',
        'Framework :: Django :: 5.1',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Database',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    python_requires='>=3.9',
    install_requires=[
        'Django >=4.2',
        'asgiref >=3.6',
        'psycopg[binary] >=3.1',
    ],
    extras_require={
        'psycopg2': ['psycopg2-binary >=2.9'],
        'test': ['pytest >=7.0'],
    },
    zip_safe=False,
)
