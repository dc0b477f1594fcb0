from setuptools import setup, find_packages

setup(
    name="flickr_oauth",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.31.0",
        "keyring>=24.3.0"
    ],
    extras_require={
        "test": ["pytest>=7.4"]
    },
    python_requires=">=3.9",
)
