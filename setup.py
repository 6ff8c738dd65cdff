import setuptools

setuptools.setup(
    name="bbbs",
    version="0.1.0",
    author="The bbbs committers",
    description=("Rebuild an SKSA with a new SA1 wrapping a payload"),
    license="Apache Software License",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.6",
    install_requires=[
        'cryptography>=2.4.2',
        'intelhex>=2.2.1',
        'click',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        "console_scripts": ["bbbs=bbbs.main:bbbs"]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Development Status :: 4 - Beta",
        "Topic :: Software Development :: Build Tools",
        "License :: OSI Approved :: Apache Software License",
    ],
)
