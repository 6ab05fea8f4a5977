[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vidpipe"
version = "0.1.0"
description = "Pure-Python helpers for video pipelines: label placement, codec and surface formats, decoder geometry, demux details and H.264 NAL unit inspection"
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "h264", "nalu", "annexb", "label-placement", "decoder", "demuxer", "pipeline"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vidpipe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
