# setup.py
from setuptools import setup, find_packages

setup(
    name='rui',
    version='0.1.0',
    description='Server-driven UI: a Python view tree rendered by a browser or a QtWebEngine window.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # Finds `rui`, `rui.window` and `rui_cli`
    packages=find_packages(exclude=['tests', 'tests.*']),

    # The runtime page ships inside the package
    include_package_data=True,
    package_data={
        'rui': ['assets/*.html', 'assets/*.js'],
    },

    install_requires=[
        'PySide6',
        'typer[all]',
        'PyYAML',
    ],

    # `rui serve`, `rui window`, `rui config`
    entry_points={
        'console_scripts': [
            'rui = rui_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
