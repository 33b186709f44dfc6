"""
CollabHub
Backend for connecting researchers, students, founders and mentors on projects.

Architecture:
- Directory / Identity: user roster and per-session login state
- Projects / Applications: repositories over a pluggable persistence strategy
  (local records, or MongoDB with optional live feed)
- Messaging: in-memory conversations
"""

__version__ = "1.0.0"
