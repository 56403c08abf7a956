from setuptools import setup, find_packages

with open("Readme.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="jmx-query-agent",
    version="1.0.0",
    author="JMX Agent Team",
    description='Agent qui interroge des ressources JMX via Jolokia et transmet les résultats à des writers.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    include_package_data=True,
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.8',
    install_requires=[
        "requests>=2.28.0",
        "urllib3>=1.26.0",
        "schedule>=1.2.0",
        "configparser>=5.3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "dev": [
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },

    entry_points='''
        [console_scripts]
        jmx-query-agent=jmx_agent.main:main
    '''
)
