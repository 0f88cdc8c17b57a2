# -*- coding: utf-8 -*-
"""
Catalog Module - Library catalog synchronization.

Discovers libraries on the xod.io registry, extracts their metadata,
merges the curated overlay and writes a deterministic catalog document.

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
