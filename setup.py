# setup.py
from setuptools import setup, find_packages

# Version is defined here to avoid import issues during build
__version__ = "1.0.0"

setup(
    name='signsync',
    version=__version__,
    description='S3 media sync for digital signage - keeps a local video directory in step with a bucket.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'boto3>=1.28.0',
        'click>=8.1.0',
        'pydantic>=2.0',
        'rich>=13.0.0',
        'PyYAML>=6.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'signsync = signsync.cli:cli',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: POSIX :: Linux",
        "Environment :: Console",
        "Environment :: No Input/Output (Daemon)",
        "Topic :: Multimedia :: Video",
        "Topic :: Utilities",
    ],
    python_requires='>=3.10',
    keywords='digital signage, s3, sync, media, kiosk',
)
