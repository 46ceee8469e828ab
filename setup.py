#!/usr/bin/env python
from setuptools import setup, find_packages

setup(name  = 'actionlock',
    version = '1.0.0',
    description = 'A distributed lock for GitHub Actions built on top of DynamoDB',
    long_description='A distributed lock for GitHub Actions built on top of DynamoDB conditional writes',
    classifiers = [
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: POSIX :: Linux',
        'Operating System :: Unix',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking',
        'Topic :: Utilities'
    ],
    keywords = 'python dynamodb lock github-actions',
    license = 'BSD',
    packages = find_packages(),
    platforms = ['Linux', 'Mac OS X', 'Win'],
    include_package_data = True,
    zip_safe = True,
    python_requires = '>=3.7',
    install_requires = [ 'boto3 >= 1.20.0', 'botocore >= 1.23.0' ],
    extras_require = {
        'quality'   : [ 'coverage >= 5.0', 'pytest >= 7.0', 'mock >= 4.0.0', 'pycodestyle >= 2.6.0' ],
        'documents' : [ 'Sphinx >= 1.2.2' ],
    },
    entry_points = {
        'console_scripts': [ 'actionlock = actionlock.cli:main' ],
    },
)
