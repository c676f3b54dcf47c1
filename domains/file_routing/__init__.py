"""
File Routing Domain

Watches one directory and moves new files into destination directories
chosen by extension:
- rules.py - Extension index built from the ordered rule list
- collisions.py - Timestamped names when the destination is taken
- mover.py - Atomic rename with a copy+delete fallback across devices
- pipeline.py - Event loop tying the above together
- watchers/filesystem.py - watchdog-backed event source
"""

__all__ = ["collisions", "events", "mover", "pipeline", "rules"]
