# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release pipeline for crossrel.

Subsystems:
  - build: toolchain discovery and per-target cross-compilation
  - packaging: per-platform tar.gz / zip archives with fused hashing
  - manifests: the manifest-<version>.txt checksum file
  - checksums: re-verification of a written manifest
  - orchestrator: the platform-by-platform composition of the above
"""
