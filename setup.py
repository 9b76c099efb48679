import re

import setuptools


with open('lineardynamics/__init__.py', 'r') as fh:
    __version__ = re.search(r"^__version__ = '(.+)'$", fh.read(),
                            re.MULTILINE).group(1)

with open('README.md', 'r') as fh:
    long_description = fh.read()

with open('requirements.txt', 'r') as fh:
    requirements = fh.read().splitlines()

if __name__ == '__main__':
    setuptools.setup(
        name='lineardynamics',
        version=__version__,
        description="Closed-form propagation, discretization, and optimal "
                    "steering for linear time-invariant systems",
        long_description=long_description,
        long_description_content_type='text/markdown',
        packages=['lineardynamics', 'lineardynamics.steering'],
        python_requires='>=3.8',
        install_requires=requirements,
        extras_require={'test': ['pytest']})
