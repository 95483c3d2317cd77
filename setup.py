from setuptools import setup, find_packages
import re

# Read version from liqcalc/__init__.py
with open('liqcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='liq-calc',
    version=version,
    packages=find_packages(include=['liqcalc', 'liqcalc.*']),
    package_data={
        'liqcalc.sdk.parameters': ['rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'liq-calc=liqcalc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Chilean monthly payroll liquidation engine.',
    python_requires='>=3.10',
)
