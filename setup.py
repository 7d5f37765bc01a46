#!/usr/bin/env python
from setuptools import setup
import os


def get_version():
    curdir = os.path.dirname(__file__)
    filename = os.path.join(curdir, 'src', 'designfx', 'version.py')
    with open(filename, 'rb') as fp:
        return fp.read().decode('utf8').split('=')[1].strip(" \n'")


def readme():
    with open('README.rst') as f:
        return f.read()


setup(
    name='designfx',
    version=get_version(),
    description='Non-destructive adjustment layers for layered image documents',
    long_description=readme(),
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Multimedia :: Graphics :: Editors :: Raster-Based',
    ],
    keywords='photoshop psd adjustment layers filters svg',
    license='MIT License',
    package_dir={'': 'src'},
    packages=[
        'designfx',
        'designfx.core',
        'designfx.renderer',
    ],
    python_requires='>=3.10',
    install_requires=[
        'pillow',
        'numpy',
        'psd-tools>=1.9',
    ],
    extras_require={
        'test': [
            'pytest'],
    },
    include_package_data=True,
    entry_points={
        'console_scripts': ['designfx=designfx.__main__:main']
    },
    )
