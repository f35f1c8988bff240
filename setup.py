from setuptools import setup, find_packages

setup(
    name="charisma",
    version="1.0.0",
    description="Charisma — interactive AI coding agent for the terminal.",
    long_description="""Charisma features:
- Generate code in C, C++, Python, JavaScript, Java, Go or Ruby from a prompt
- Syntax-highlighted preview before saving
- Optional in-place formatting with clang-format, black, prettier, gofmt, rufo
- Copy generated code to the system clipboard
- Persistent run history
- Publish any file as a GitHub gist
""",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "mistralai>=1.0.0,<2",
        "rich>=13.7.0",
        "click>=8.1.0",
        "prompt_toolkit>=3.0.0",
        "requests>=2.31.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "charisma=charisma.CLI:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
