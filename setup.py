#!/usr/bin/env python

import re

from setuptools import setup


version = ''
with open('osslite/__init__.py', 'r') as fd:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                        fd.read(), re.MULTILINE).group(1)

if not version:
    raise RuntimeError('Cannot find version information')


with open('README.rst', 'rb') as f:
    readme = f.read().decode('utf-8')

setup(
    name='osslite',
    version=version,
    description='A lightweight sync and async client for Aliyun OSS (Object Storage Service)',
    long_description=readme,
    packages=['osslite'],
    install_requires=['requests!=2.9.0',
                      'aiohttp>=3.8',
                      'aiofiles',
                      'yarl',
                      'crcmod>=1.7',
                      'defusedxml'],
    extras_require={
        'test': ['mock', 'pytest']
    },
    python_requires='>=3.8',
    include_package_data=True,
    url='http://oss.aliyun.com',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Framework :: AsyncIO'
    ]
)
