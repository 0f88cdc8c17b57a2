# -*- coding: utf-8 -*-
"""
Mirror Module - Incremental, checksum-verified artifact mirror.

Downloads the artifact of every catalogued library version through the
package-manager API and keeps a cumulative state document and manifest.

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
