"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def simple_rest_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    version = "1.0.0"

    setup(
        name="simple_rest",
        packages=find_packages(exclude=["tests", "tests.*", "examples"]),
        package_data={"simple_rest": ["messages/*.yaml"]},
        version=version,
        license="MIT",
        description="simple_rest : generic CRUD REST resource controllers for Flask and SQLAlchemy",
        long_description=open("README.rst").read(),
        keywords=["SqlAlchemy", "Flask", "REST", "CRUD"],
        python_requires=">=3.8, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "License :: OSI Approved :: MIT License",
            "Intended Audience :: Developers",
            "Framework :: Flask",
            "Topic :: Software Development :: Libraries",
            "Environment :: Web Environment",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.8",
        ],
        extras_require={"test": ["pytest>=7.0"]},
    )


simple_rest_setup()  # pragma: no cover
