"""
Sway Autolayout

Daemon that keeps a master/stack layout on Sway: one wide main column per
workspace, further windows docked beside it.
"""

__version__ = "0.1.0"
