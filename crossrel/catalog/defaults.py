# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The built-in release catalog.

This is the matrix crossrel builds when no --config is given. It is plain
data on purpose: the config schema turns it into validated models, and
configs/release.yaml carries the same table as a data file. Bump
CATALOG_VERSION whenever a platform, component, or stamp package changes.
"""

CATALOG_VERSION = "1.0.0"

PRODUCT = "decred"
RELEASE_VERSION = "v1.5.0-rc1"

BUILD_TAGS: tuple[str, ...] = ("safe", "netgo")
BUILD_METADATA = "release"
PRE_RELEASE = "rc1"

# Packages whose BuildMetadata / PreRelease variables get stamped through
# the linker, one per embedded sub-project.
VERSION_PACKAGES: tuple[str, ...] = (
    "github.com/decred/dcrd/internal/version",
    "github.com/decred/dcrwallet/version",
    "github.com/decred/dcrlnd/build",
)

# (os, arch), in build order.
PLATFORMS: tuple[tuple[str, str], ...] = (
    ("darwin", "amd64"),
    ("freebsd", "amd64"),
    ("linux", "386"),
    ("linux", "amd64"),
    ("linux", "arm64"),
    ("openbsd", "amd64"),
    ("windows", "386"),
    ("windows", "amd64"),
)

# (module path, build directory), in build order. The build directory holds
# the go.mod that pins the module's dependencies.
COMPONENTS: tuple[tuple[str, str], ...] = (
    ("decred.org/dcrwallet", "./dcrwallet"),
    ("github.com/decred/dcrd", "./dcrd"),
    ("github.com/decred/dcrd/cmd/dcrctl", "./dcrd"),
    ("github.com/decred/dcrd/cmd/promptsecret", "./dcrd"),
    ("github.com/decred/dcrlnd/cmd/dcrlnd", "./dcrlnd"),
)

OUTPUT_ROOT = "bin"
ARCHIVE_DIR = "archive"
