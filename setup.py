from setuptools import setup
import sys

if sys.version_info < (3, 8):
    print('Sorry, olcontig requires Python version 3.8+.')
    sys.exit()

with open('README.md') as fh:
    long_description = fh.read()

setup(
    name='olcontig',
    version='0.1',

    description='Overlap-layout-consensus assembly of sequence fragments into contigs',
    long_description=long_description,
    long_description_content_type="text/markdown",

    packages=['olcontig', 'olcontig.core', 'olcontig.utils'],
    python_requires='>=3.8',
    install_requires=['biopython',
                      'pysam',
                      'aligntools',
                      'networkx'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['olcontig=olcontig.__main__:cli']},
)
