#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from glob import glob
from os.path import basename
from os.path import splitext

from setuptools import find_packages
from setuptools import setup


setup(
    name="rubrica",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="markdown-ish autoformatting for a rich text editor",
    long_description="Typing '# ', '* ', '** ' or '*** ' at the start of a block turns it into a heading, bold, red or underlined text.",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    url="https://github.com/inklesspen/rubrica",
    packages=find_packages("src"),
    package_dir={"": "src"},
    py_modules=[splitext(basename(path))[0] for path in glob("src/*.py")],
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Text Editors :: Word Processors",
        "Topic :: Text Processing :: Markup",
    ],
    project_urls={
        "Issue Tracker": "https://github.com/inklesspen/rubrica/issues",
    },
    keywords=["rich text", "editor", "autoformat"],
    python_requires=">=3.11",
    install_requires=[
        "attrs>=22.2.0",
        "cattrs>=22.2.0",
        "msgspec",
        "pygtrie>=2.4.2",
        "python-dateutil>=2.8.1",
        "timeflake>=0.4.0",
        "trio>=0.22.0",
        "sqlalchemy>=1.4.18",
    ],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    setup_requires=[
        "setuptools>=30.3.0",
        "wheel",
    ],
)
