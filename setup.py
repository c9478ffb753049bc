from setuptools import setup, find_packages
setup(
    name='bedrock-pipeline',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    package_data={
        'bedrock_pipeline': [
            'config/*.ini',
        ],
    },
    description='Provision Azure DevOps pipelines for bedrock managed services.',
    python_requires='>=3.8',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'pydantic>=2.0.0',
        'azure-devops>=7.1.0b4',
        'msrest>=0.7.1',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'bedrock = bedrock_pipeline.main:program.run',
        ],
    },
)
