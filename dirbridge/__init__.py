"""
dirbridge - native directory access for a host application.

Gates:
- DirectoryGate: folder chooser, write probe, file read/write and
  directory enumeration behind one method contract
- Config: schema-driven configuration (.env, JSON file, environment)
"""

__version__ = "1.0.0"
