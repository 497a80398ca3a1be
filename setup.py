from pathlib import Path
from setuptools import setup, find_packages


def read_requirements(filename):
    with open(filename) as f:
        return [req for req in (req.partition('#')[0].strip() for req in f) if req]


setup(
    name='simpledata',
    version='0.1.0',
    description='Client side object graph mapper with an identity cache.',
    long_description=Path('README.rst').read_text(),
    long_description_content_type='text/x-rst',
    license='MIT',
    packages=find_packages(include=['simpledata', 'simpledata.*']),
    python_requires='>=3.9',
    install_requires=read_requirements('requirements.in'),
    extras_require={
        'test': read_requirements('requirements-test.in'),
    },
    entry_points={
        'console_scripts': [
            'simpledata = simpledata.cli.main:app',
        ]
    },
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Software Development :: Libraries',
    ],
)
