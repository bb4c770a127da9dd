# SPDX-License-Identifier: MIT
"""Configuration model, resolution and argument translation."""
