[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minikernel"
version = "0.1.0"
description = "A simulated teaching kernel: serial console, cpio initramfs reader, buddy page allocator, small-block heap and timer message queue"
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "buddy-allocator", "cpio", "uart", "simulation", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System Kernels",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minikernel = "minikernel.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["minikernel"]

[tool.pytest.ini_options]
addopts = "-ra"
