import os.path

from setuptools import find_packages, setup


def read(fname):
    path = os.path.join(os.path.dirname(__file__), fname)
    with open(path, "r") as rfile:
        return rfile.read()


metadata = {}
exec(read("src/atrium/__about__.py"), metadata)


setup(
    name="atrium",
    version=metadata["__version__"],
    description=metadata["__description__"],
    license="MIT",
    long_description=read("README.rst") + "\n\n" + read("HISTORY.rst"),
    long_description_content_type="text/x-rst",
    author=metadata["__author__"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    install_requires=[],
    extras_require={
        "requests": ["requests>=2.20"],
        "test": ["pytest>=7", "pytest-mock>=3", "requests>=2.20"],
    },
    keywords=[
        "api-wrapper",
        "http",
        "rest",
        "pagination",
        "tasks",
    ],
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages("src"),
)
