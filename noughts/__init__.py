"""
Noughts - Turn-based N x N Grid Game Engine

A deterministic engine for noughts-and-crosses style games on boards from
3x3 up to 9x9, with a configurable run length to win. It provides:
- Immutable board state and win/tie detection
- A session state machine for human and computer turns
- Computer opponents at three strengths (random, heuristic, search)
- Snapshots and a compact wire form for front-ends
"""

__version__ = "0.1.0"
