#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages


name = 'agora'
version = '0.1.0'


def read_requires(path=None):
    from os.path import dirname, join

    if path is None:
        path = join(dirname(__file__), 'requirements.txt')

    with open(path) as fp:
        return [l.strip() for l in fp.readlines() if l.strip()]


setup(**{
    'name': name,
    'version': version,
    'author': 'Singularita s.r.o.',
    'description': 'Community discussion site with forums, topics and API',
    'license': 'MIT',
    'keywords': 'forum discussion community',
    'url': 'http://github.com/singularita/agora/',
    'include_package_data': True,
    'zip_safe': False,
    'packages': find_packages(exclude=['tests', 'tests.*']),
    'classifiers': [
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3 :: Only',
        'License :: OSI Approved :: MIT License',
        'Framework :: Flask',
    ],
    'install_requires': read_requires(),
    'extras_require': {
        'test': ['pytest', 'mongomock'],
    },
    'entry_points': {
        'console_scripts': [
            'agora = agora.__main__:main',
        ],
    },
})


# vim:set sw=4 ts=4 et:
