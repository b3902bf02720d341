"""
Viewport, scaling and interaction engine.

Nothing in this package imports Qt; tests drive it with ``RecordingHost``.
"""
