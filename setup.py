import setuptools

with open('README.md', 'r') as fh:
    long_description = fh.read()

setuptools.setup(
    name='h5animate',
    version='0.1.0',
    description='Binary animation container codec with legacy JSON converter.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        'deal',
        'numpy',
        'Pillow',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Programming Language :: Python :: 3',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Games/Entertainment',
        'Topic :: Utilities'
    ],
    python_requires='>=3.8',
    keywords='animation sprite sheet webp binary container codec legacy converter'
)
