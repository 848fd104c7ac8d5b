# SPDX-FileCopyrightText: 2025-present guitarsleuth contributors
#
# SPDX-License-Identifier: MIT
__version__ = "0.3.0"
