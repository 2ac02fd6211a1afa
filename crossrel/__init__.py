# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
crossrel: cross-compiling release orchestrator.

Builds every component of a release for every target platform, packs each
platform's executables into one archive, and writes a SHA256 manifest that
covers all archives of the run.
"""

__version__ = "0.1.0"
