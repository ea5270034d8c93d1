from setuptools import find_packages, setup

setup(
    name="chart-owners",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.11",
    description="Tools to audit OWNERS files against GitHub collaborators "
                "and to generate OWNERS files from chart maintainers.",

    packages=find_packages(exclude=('tests',)),
    package_data={'chart_owners': ['test/fixtures/*/*']},

    install_requires=[
        "Click>=8.0,<9.0",
        "PyGithub>=2.1,<3.0",
        "requests>=2.31,<3.0",
        "urllib3>=1.26.0,<2.0",
        "ruamel.yaml>=0.17.21,<0.19.0",
        "toml>=0.10.0,<0.11.0",
        "pydantic>=2.0,<3.0",
        "sentry-sdk>=1.40,<3.0",
    ],

    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-mock>=3.12",
            "httpretty>=1.1",
        ],
    },

    test_suite="chart_owners.test",

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
    ],
    entry_points={
        'console_scripts': [
            'audit-owners = chart_owners.cli:audit_owners',
            'gen-owners = chart_owners.cli:gen_owners',
        ],
    },
)
