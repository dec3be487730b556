"""envfetch version.

Bump rules:
- Patch (x.y.Z): bug fixes
- Minor (x.Y.0): new commands or options, config keys
- Major (X.0.0): changes to the rc-file format or CLI breaking changes
"""

VERSION = "2.1.0"
