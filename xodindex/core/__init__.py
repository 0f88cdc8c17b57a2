# -*- coding: utf-8 -*-
"""
Core Module - Shared building blocks for the sync and mirror pipelines.

Contains configuration, the error taxonomy, identifier and version
handling, the resilient HTTP fetch layer, JSON I/O and the worker pool.

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
