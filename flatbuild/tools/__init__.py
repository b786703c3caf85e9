# SPDX-License-Identifier: MIT
"""Build driver protocol."""
