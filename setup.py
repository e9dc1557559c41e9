from setuptools import setup, find_packages
setup(
    name='build-types',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    description='Mutually exclusive build types for invoke task collections, and test bucket splitting.',
    python_requires='>=3.8',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'bt = buildtypes.program:main',
        ],
        'pytest11': [
            'buildtypes = buildtypes.pytest_plugin',
        ],
    },
)
