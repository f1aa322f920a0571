#!/usr/bin/env python
from setuptools import find_packages, setup

VERSION = __import__("catalog").get_version()
INSTALL_REQUIREMENTS = [
    "boto3",
    "Django>=4.2",
    "djangorestframework",
    "django-redis",
    "django-storages[s3]",
    "django-structlog",
    "Pillow",
    "requests",
    "sentry-sdk",
    "structlog",
]
TEST_REQUIREMENTS = ["pytest", "pytest-django"]
SCRIPTS = ["manage.py"]
DESCRIPTION = "Bulk JSON import for catalog content with media library images"
CLASSIFIERS = """\
Environment :: Web Environment
Framework :: Django
Programming Language :: Python
Programming Language :: Python :: 3
""".splitlines()

with open("README.md", "r") as f:
    LONG_DESCRIPTION = f.read()


setup(
    name="catalog-importer",
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    packages=find_packages(
        include=["catalog*", "configuration*", "importer*", "media_library*"]
    ),
    include_package_data=True,
    scripts=SCRIPTS,
    install_requires=INSTALL_REQUIREMENTS,
    extras_require={"test": TEST_REQUIREMENTS},
    python_requires=">=3.10",
    classifiers=CLASSIFIERS,
)
