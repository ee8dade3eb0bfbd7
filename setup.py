from setuptools import find_packages, setup

setup(
    name="gitolite-client",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.11",
    description="Manage users, groups and repository rules of a gitolite "
                "admin repository.",

    packages=find_packages(exclude=('tests',)),

    install_requires=[
        "toml>=0.10.0,<0.11.0",
        "pydantic>=1.10,<3",
    ],

    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-mock>=3.10",
        ],
    },

    test_suite="gitolite_client.test",

    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
    ],
)
