#!/usr/bin/env python3
"""
Setup script for termkeys
"""

from setuptools import setup, find_packages
import os
import sys

# Import the version without importing the package
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'termkeys'))
from __version__ import __version__

# Read README for long_description
def read_file(filename):
    with open(os.path.join(os.path.dirname(__file__), filename), encoding='utf-8') as f:
        return f.read()

setup(
    name='termkeys',
    version=__version__,
    description='Buffered terminal key input with a synchronous "is pressed" API for polling loops',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'evdev',         # Key presses from /dev/input devices (DeviceSource)
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov',
            'pytest-timeout',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'termkeys=termkeys.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Operating System :: POSIX :: Linux',
        'Environment :: Console',
        'Topic :: Terminals',
        'Topic :: Games/Entertainment',
    ],
)
