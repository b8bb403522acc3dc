from setuptools import setup
# read the contents of your README file
from pathlib import Path

# Freeze requirements instructions
# pip uninstall icon_capture_tools
# python ./setup.py sdist
# pip install icon_capture_tools
# pip freeze > requirements.txt


this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# Read the dependencies from install_requires.txt
# install_requires.txt contains relaxed constraints for distribution
with open('install_requires.txt', encoding='utf-8') as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

setup(
    name='icon_capture_tools',
    version='1.0.0',
    packages=[
        'icon_capture_tools',
        'icon_capture_tools.batch',
        'icon_capture_tools.batch.models',
        'icon_capture_tools.services',
        'icon_capture_tools.utils',
    ],
    python_requires='>=3.9',
    license='GNU General Public License v3.0',
    author='Icon Capture Tools contributors',
    description='Batch generation of fixed-size icon images from renderable objects.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'icon-capture=icon_capture_tools.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Games/Entertainment',
    ],
)
