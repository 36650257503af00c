import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="erb_to_phlex",
    version="1.0.1",
    description="Convert ERB templates into Phlex components",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Text Processing :: Markup :: HTML",
        "Intended Audience :: Developers",
    ],
    keywords="erb phlex ruby rails html template converter code generation",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "beautifulsoup4>=4.12.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-ruby>=0.23.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "erb_to_phlex=erb_to_phlex.erb_to_phlex:erb_to_phlex",
        ],
    },
    include_package_data=True,
    package_data={
        "erb_to_phlex": ["templates/**/*.jinja2", "tests/test_data/**/*.json"],
    },
    zip_safe=False,
)
