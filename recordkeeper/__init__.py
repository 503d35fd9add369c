"""
recordkeeper - Source Package

Flat-file backed ordered record stores for an expense tracker and a to-do
list, with a small command layer any front end can drive.

DESIGN PRINCIPLES:
1. Validate at the boundary, before any store is touched
2. Every change is written through to the backing file immediately
3. Failures are reported, never fatal
4. Every command is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
