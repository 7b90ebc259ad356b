from setuptools import setup, find_packages

setup(
    name='csx-preprocessor',
    version='0.1.0',
    py_modules=['csxprep', 'project_scan'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'lark',
        'pydantic>=2.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'csxprep = csxprep:main',
        ],
    },
)
