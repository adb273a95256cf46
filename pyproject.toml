[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "channelzweb"
version = "0.1.0"
description = "A small WSGI web UI that renders gRPC channelz data as HTML pages"
requires-python = ">=3.10"
keywords = ["grpc", "channelz", "monitoring", "debugging", "wsgi", "observability"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "grpcio",
    "protobuf",
    "jinja2",
    "werkzeug",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["channelzweb"]

[tool.hatch.build.targets.sdist]
include = ["channelzweb", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
