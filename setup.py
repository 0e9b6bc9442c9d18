from setuptools import setup, find_packages

# Get the long description from the README file
def readme():
    with open('README.md', encoding='utf-8') as f:
        return f.read()

setup(
    name='quadgrid',
    version='0.1.0',
    description='Quadrilateral and hexahedral mesh generation, extrusion, '
                'refinement and VTK output',
    long_description=readme(),
    long_description_content_type='text/markdown',
    license='MIT',
    packages=find_packages(exclude=['tests', '*.tests', '*.tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.16.0',
        'meshio>=5.0',
    ],
    extras_require={
        'dev': [
            'pytest>=6.0',
            'pytest-cov>=2.10',
            'pytest-benchmark>=3.4',
            'matplotlib>=3.0',
        ],
        'test': [
            'pytest>=6.0',
            'pytest-benchmark>=3.4',
            'matplotlib>=3.0',
        ],
        'plotting': [
            'matplotlib>=3.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'quadgrid=quadgrid.__main__:main',
        ],
    },
    keywords=['mesh', 'quadrilateral', 'hexahedral', 'extrusion',
              'refinement', 'vtk', 'finite-element'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    zip_safe=False,
)
