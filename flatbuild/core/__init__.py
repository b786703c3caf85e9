# SPDX-License-Identifier: MIT
"""Core dependency discovery and staleness resolution."""
