"""
Minimal setup.py for meson_ext

Runtime Requirements:
- Meson installed on the system (or pointed to by MESON / MESON_<TARGET>)
- Ninja, as used by Meson's default backend

Environment:
- TARGET: target triple, selects MESON_<TARGET_UPPER_SNAKE> as executable override
- MESON: generic executable override
- OUT_DIR: output directory when none is set explicitly
- PROFILE: debug or release, used when no profile is set explicitly
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read README for long description
readme_path = Path("README.md")
long_description = ""
if readme_path.exists():
    with open(readme_path, "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="meson-ext",
    version="0.1.0",
    author="meson-ext developers",
    description="Find a system Meson installation and drive configure, build and install from build scripts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["meson_ext", "meson_ext.*"]),
    entry_points={
        "console_scripts": [
            "meson-ext=meson_ext.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=5.1",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Build Tools",
    ],
)
