import setuptools
import os

# READMEファイルがあれば読み込む
long_description = ""
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()

# パッケージ設定
setuptools.setup(
    name="collage",
    version="0.1.0",
    author="collage Team",
    description="Open a desktop window showing an in-memory raster image",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "."},
    packages=setuptools.find_packages(where=".", include=["collage", "collage.*", "logutils", "logutils.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PySide6>=6.0.0",
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "collage-frame=collage.demo:main",
        ],
    },
    include_package_data=True,
)
