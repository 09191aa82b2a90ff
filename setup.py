from setuptools import find_packages, setup

setup(
    name='volfft',
    version='2026.10.19',
    author='Rafael Celestre',
    author_email='rafael.celestre@synchrotron-soleil.fr',
    description='Fourier transforms and spectral projections of image volumes',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    license='CECILL-2.1',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.9',
    install_requires=[
        'numpy>=1.20',
        'scipy>=1.4',
        'h5py',
        'Pillow',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'volfft=volfft.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
