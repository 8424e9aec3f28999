#
from setuptools import setup, find_packages

def get_version():
    """
    Get version number from the pierce_seci module.

    The easiest way would be to just ``import pierce_seci``, but note that this may
    fail if the dependencies have not been installed yet. Instead, we've put
    the version number in a simple version_info module, that we'll import here
    by temporarily adding the package directory to the pythonpath using sys.path.
    """
    import os
    import sys

    sys.path.append(os.path.abspath(os.path.join('src', 'pierce_seci')))
    from version_info import VERSION as version
    sys.path.pop()

    return version

def get_readme():
    """
    Load README.md text for use as description.
    """
    with open('README.md') as f:
        return f.read()

setup(
    # Module name (lowercase)
    name='pierce_seci',

    # Version
    version=get_version(),

    description="Monte Carlo SECI simulation of Pierce's disease in wild-type and transgenic grapevines.",

    long_description=get_readme(),

    long_description_content_type='text/markdown',

    license='MIT license',

    url='',

    # Packages to include
    package_dir={'': 'src'},
    packages=find_packages(where='src'),

    python_requires='>=3.9',

    # List of dependencies
    install_requires=[
        # Dependencies go here!
        'numpy>=1.22',
        'matplotlib',
        'pandas',
        'scipy',
    ],
    extras_require={
        'dev': [
            # Flake8 for code style checking
            'flake8>=3',
            'pytest',
            'pytest-cov',
        ],
    },
    entry_points={
        'console_scripts': [
            'pierce-seci=pierce_seci.runner:cli',
        ],
    },
)
