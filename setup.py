#!/usr/bin/env python
from setuptools import setup, find_packages

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name='ldap-tasks',
    version='1.0.0',
    description='Paged LDAP and Active Directory searches, group membership and user deletion tasks',
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords=['ldap', 'active directory'],
    author="Caltech IMSS ADS",
    author_email="imss-ads-staff@caltech.edu",
    packages=find_packages(exclude=['bin']),
    include_package_data=True,
    python_requires='>=3.10',
    install_requires=[
        'python-ldap',
        'ldap3',
    ],
    extras_require={
        'test': [
            'python-ldap-faker',
            'pytest',
        ],
        'docs': [
            'sphinx',
            'sphinx_rtd_theme',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3"
    ],
)
