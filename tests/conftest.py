# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for crossrel tests.

The interesting one is `fake_toolchain`: a tiny Python script that answers
`version` and `build -o <out> ... <module>` the way the real toolchain would,
writing a JSON record of what it saw (env, cwd, args) as the "executable".
That lets the whole pipeline run in a temp directory without a compiler.

Failures are injected with FAKE_GO_FAIL, a comma-separated list of either
`<module>` or `<module>@<os>-<arch>`. Every build invocation is appended to
the file named by FAKE_GO_LOG, when set.
"""

import stat
import sys
import textwrap
from pathlib import Path

import pytest

from crossrel.config.schema import Component, Platform, ReleaseConfig

_FAKE_TOOLCHAIN_SOURCE = textwrap.dedent("""\
    import json
    import os
    import sys

    args = sys.argv[1:]
    if args[:1] == ["version"]:
        print("go version go1.22.0 fake/amd64")
        sys.exit(0)
    if args[:1] != ["build"]:
        print("unsupported command: " + " ".join(args), file=sys.stderr)
        sys.exit(2)

    out = args[args.index("-o") + 1]
    module = args[-1]
    target = os.environ.get("GOOS", "") + "-" + os.environ.get("GOARCH", "")

    log_path = os.environ.get("FAKE_GO_LOG")
    if log_path:
        with open(log_path, "a") as log:
            log.write(module + "@" + target + "\\n")

    failing = [f for f in os.environ.get("FAKE_GO_FAIL", "").split(",") if f]
    if module in failing or module + "@" + target in failing:
        print("fake: cannot build " + module + " for " + target, file=sys.stderr)
        sys.exit(1)

    print("fake: building " + module)
    record = {
        "module": module,
        "goos": os.environ.get("GOOS"),
        "goarch": os.environ.get("GOARCH"),
        "cgo_enabled": os.environ.get("CGO_ENABLED"),
        "goflags": os.environ.get("GOFLAGS"),
        "cwd": os.getcwd(),
        "args": args,
    }
    with open(out, "w") as fh:
        json.dump(record, fh, sort_keys=True)
""")


@pytest.fixture()
def fake_toolchain(tmp_path: Path) -> Path:
    """An executable stand-in for `go` that writes JSON instead of binaries."""
    script = tmp_path / "toolchain" / "fake-go"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{_FAKE_TOOLCHAIN_SOURCE}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture()
def release_root(tmp_path: Path) -> Path:
    """A release root with the build directories the sample catalogs use."""
    root = tmp_path / "release"
    (root / "example").mkdir(parents=True)
    (root / "other").mkdir()
    return root


@pytest.fixture()
def single_target_settings() -> ReleaseConfig:
    """One linux/amd64 platform, one component: the smallest useful release."""
    return ReleaseConfig(
        product="example",
        version="v0.1.0",
        version_packages=["example/internal/version"],
        platforms=[Platform(os="linux", arch="amd64")],
        components=[Component(module="example/foo", build_dir="./example")],
    )


@pytest.fixture()
def matrix_settings() -> ReleaseConfig:
    """Three platforms (one windows) × two components."""
    return ReleaseConfig(
        product="example",
        version="v0.2.0",
        version_packages=["example/internal/version"],
        platforms=[
            Platform(os="linux", arch="amd64"),
            Platform(os="darwin", arch="arm64"),
            Platform(os="windows", arch="amd64"),
        ],
        components=[
            Component(module="example/foo", build_dir="./example"),
            Component(module="example.org/other/cmd/bar", build_dir="./other"),
        ],
    )


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A small, valid release config on disk."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
        release:
          product: "example"
          version: "v0.3.0"
          platforms:
            - { os: "linux", arch: "amd64" }
          components:
            - { module: "example/foo", build_dir: "./example" }
    """)
    config_file = tmp_path / "release.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (unknown key)."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("release:\n  product: x\n  flavour: spicy\n", encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
