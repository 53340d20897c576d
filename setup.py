import io
import os
import re

from setuptools import find_packages, setup


with io.open("htmlwidgets/__init__.py", "rt", encoding="utf8") as f:
    version = re.search(r"__version__ = \"(.*?)\"", f.read()).group(1)


def fpath(name):
    return os.path.join(os.path.dirname(__file__), name)


def read(fname):
    with open(fpath(fname)) as f:
        return f.read()


def desc():
    return read("README.rst")


setup(
    name="htmlwidgets",
    version=version,
    license="LGPL-3.0-or-later",
    author="Christian Neumann",
    author_email="cneumann@datenkarussell.de",
    description=(
        "Bind flat html form submissions to nested Python objects"
        " and describe them for template rendering."
    ),
    long_description=desc(),
    long_description_content_type="text/x-rst",
    packages=find_packages(exclude=["tests*"]),
    include_package_data=True,
    zip_safe=False,
    platforms="any",
    install_requires=[
        "Flask-Babel>=1, <5",
        "markupsafe>=2, <4",
        "python-dateutil>=2.3, <3",
        "werkzeug>=2, <4",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Web Environment",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
)
