'''A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
'''

# To use a consistent encoding
from codecs import open as copen
from os import path

# Always prefer setuptools over distutils
from setuptools import setup

# Get the version
import cobstools

# Get the long description from the README file
HERE = path.abspath(path.dirname(__file__))
with copen(path.join(HERE, 'README.rst'), encoding='utf-8') as _file:
    LONG_DESC = _file.read()

setup(
    name='cobstools',
    # https://packaging.python.org/en/latest/single_source_version.html
    version=cobstools.__version__,
    description='Consistent Overhead Byte Stuffing codec and serial framing tools',
    long_description=LONG_DESC,
    license='MIT',
    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Environment :: Console',
        'Development Status :: 5 - Production/Stable',
        'License :: OSI Approved :: MIT License',
        'Intended Audience :: Developers',
        'Intended Audience :: Telecommunications Industry',
        'Topic :: Software Development :: Embedded Systems',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Terminals :: Serial',
        'Topic :: Utilities',
        'Programming Language :: Python :: 3',
        'Operating System :: Microsoft :: Windows',
        'Operating System :: POSIX :: Linux'
    ],
    keywords='cobs framing serial tools',
    packages=['cobstools'],
    python_requires='>=3.6',
    include_package_data=True,
    # https://packaging.python.org/en/latest/requirements.html
    install_requires=['colorama>=0.4.6', 'pyserial>=3.0', 'tqdm'],
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': [
            'cobstools = cobstools.__main__:main'
        ]
    },
)
