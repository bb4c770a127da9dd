# SPDX-License-Identifier: MIT
"""External tools: the ispc compiler and the native archiver."""
