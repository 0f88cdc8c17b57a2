# -*- coding: utf-8 -*-
"""
xodindex - XOD library index.

Synchronizes a normalized catalog of the third-party libraries published
on xod.io and maintains a local mirror of their versioned artifacts.

License
-------
MIT License
Copyright (c) 2026 xod-library-index contributors
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

__version__ = "0.1.0"

__all__: list = ["__version__"]
