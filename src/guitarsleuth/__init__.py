# SPDX-FileCopyrightText: 2025-present guitarsleuth contributors
#
# SPDX-License-Identifier: MIT

"""GuitarSleuth - Alvarez guitar dating and identification."""

from guitarsleuth.__about__ import __version__

__all__ = ["__version__"]
