# SPDX-License-Identifier: MIT
"""Settings and platform detection."""
