[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bundlekit"
version = "0.1.0"
description = "Building blocks for application packages: Android resource structures and manifests, MSIX metadata, app bundle layouts with Info.plist, and AppImage directories."
requires-python = ">=3.10"
dependencies = [
    "lxml",
]
keywords = [
    "android",
    "arsc",
    "android-manifest",
    "msix",
    "appx",
    "block-map",
    "app-bundle",
    "info-plist",
    "appimage",
    "packaging",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bundlekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
