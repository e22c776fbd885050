"""save-manager - named versions of directory trees with a rolling autosave.

Snapshots one or more tracked paths per category, restores any version on
demand, and keeps the pre-restore state in an autosave slot.
"""

__version__ = "1.0.0"
