"""
In-memory ownership index.

This package is responsible for:
* Holding the currently published registry snapshot.
* Rebuilding the snapshot from the ownership source on refresh.
* Resolving a package name against the team-owned prefixes.
"""
