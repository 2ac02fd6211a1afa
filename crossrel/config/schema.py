# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for crossrel.

Each config section gets its own frozen pydantic model. Frozen means once you
create it, you cannot mutate it: the catalog a run starts with is the catalog
it finishes with.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Defaults come from crossrel.catalog.defaults, so an empty `release:` section
(or no config file at all) builds the full built-in matrix.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from crossrel.catalog import defaults
from crossrel.catalog.naming import exe_name, platform_dirname


class Platform(BaseModel):
    """One cross-compilation target."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    os: str = Field(min_length=1, description="Target operating system, e.g. 'linux' (GOOS)")
    arch: str = Field(min_length=1, description="Target architecture, e.g. 'amd64' (GOARCH)")

    @property
    def name(self) -> str:
        return platform_dirname(self.os, self.arch)


class Component(BaseModel):
    """
    One buildable unit.

    The build must run from build_dir because that is where the module's
    dependency pins live; two components from the same repository share it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    module: str = Field(min_length=1, description="Module / package path handed to the toolchain")
    build_dir: str = Field(
        default=".",
        description="Working directory for the build, relative to the release root",
    )


def _default_platforms() -> list[Platform]:
    return [Platform(os=goos, arch=goarch) for goos, goarch in defaults.PLATFORMS]


def _default_components() -> list[Component]:
    return [Component(module=module, build_dir=build_dir) for module, build_dir in defaults.COMPONENTS]


class GlobalConfig(BaseModel):
    """Cross-cutting settings: config versioning and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        default=defaults.CATALOG_VERSION,
        description="Schema version for compatibility tracking, e.g. '1.0.0'",
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return upper


class ReleaseConfig(BaseModel):
    """
    Everything one release run needs: identity, build flags, and the
    platform × component matrix.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    product: str = Field(
        default=defaults.PRODUCT,
        min_length=1,
        description="Archive name prefix, e.g. 'decred' in decred-linux-amd64-v1.5.0.tar.gz",
    )
    version: str = Field(
        default=defaults.RELEASE_VERSION,
        min_length=1,
        description="Release version, embedded in archive and manifest names",
    )
    tags: list[str] = Field(
        default_factory=lambda: list(defaults.BUILD_TAGS),
        description="Build tags passed with -tags",
    )
    build_metadata: str = Field(
        default=defaults.BUILD_METADATA,
        description="Value stamped into <pkg>.BuildMetadata",
    )
    pre_release: str = Field(
        default=defaults.PRE_RELEASE,
        description="Value stamped into <pkg>.PreRelease",
    )
    version_packages: list[str] = Field(
        default_factory=lambda: list(defaults.VERSION_PACKAGES),
        description="Packages whose version variables are stamped through -ldflags -X",
    )
    output_root: str = Field(
        default=defaults.OUTPUT_ROOT,
        description="Where built executables land, relative to the release root",
    )
    archive_dir: str = Field(
        default=defaults.ARCHIVE_DIR,
        description="Where archives and the manifest land, relative to the release root",
    )
    toolchain: Optional[str] = Field(
        default=None,
        description="Toolchain binary; None means look up 'go' on PATH",
    )
    platforms: list[Platform] = Field(default_factory=_default_platforms)
    components: list[Component] = Field(default_factory=_default_components)

    @model_validator(mode="after")
    def _check_unique_entries(self) -> "ReleaseConfig":
        names = [p.name for p in self.platforms]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate platforms: {', '.join(duplicates)}")

        modules = [c.module for c in self.components]
        duplicates = sorted({m for m in modules if modules.count(m) > 1})
        if duplicates:
            raise ValueError(f"duplicate components: {', '.join(duplicates)}")

        # Executables for one platform share a directory, so two modules ending
        # in the same segment would overwrite each other.
        exes = [exe_name(c.module, "") for c in self.components]
        duplicates = sorted({e for e in exes if exes.count(e) > 1})
        if duplicates:
            raise ValueError(f"duplicate executable names: {', '.join(duplicates)}")
        return self

    @property
    def ldflags(self) -> str:
        """
        Linker flags for every build.

        -buildid= strips the toolchain's build ID so identical sources give
        identical binaries; each stamp package gets its release markers.
        """
        flags = ["-buildid="]
        for package in self.version_packages:
            flags.append(f"-X {package}.BuildMetadata={self.build_metadata}")
            flags.append(f"-X {package}.PreRelease={self.pre_release}")
        return " ".join(flags)


class CrossrelConfig(BaseModel):
    """
    Top-level config container.

    A YAML file may contain only `global:`; the release section then falls
    back to the built-in catalog.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global", default_factory=GlobalConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)


def default_config() -> CrossrelConfig:
    """The config used when no file is given: the built-in catalog."""
    return CrossrelConfig()
