# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT
"""Static release catalog: platforms, components, and naming rules."""
