"""
Setup script for bda_demos package
"""

from setuptools import setup, find_packages
import os

# Read README for long description
def read_file(filename):
    filepath = os.path.join(os.path.dirname(__file__), filename)
    for enc in ('utf-8-sig', 'utf-8', 'latin-1'):
        try:
            with open(filepath, encoding=enc) as f:
                return f.read()
        except (UnicodeDecodeError, LookupError, FileNotFoundError):
            continue
    return ''

setup(
    name='bda-demos',
    version='0.1.0',
    description='Bayesian data analysis demos with a posterior diagnostics, summary and LOO comparison pipeline',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    license='MIT',

    # Package discovery from src/
    packages=find_packages(where="src"),
    package_dir={"": "src"},

    python_requires='>=3.9',

    install_requires=[
        'numpy>=1.22.0',
        'scipy>=1.7.0',
        'pandas>=1.3.0',
        'matplotlib>=3.5.0',
        'seaborn>=0.11.0',
        'pymc>=5.10.0',
        'arviz>=0.13.0,<1.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=3.0.0',
            'black>=22.0.0',
            'flake8>=4.0.0',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Mathematics',
    ],

    keywords='bayesian mcmc pymc arviz diagnostics psis loo hierarchical-models',
)
