"""
Sway Zone Navigator

Keyboard-driven window placement for Sway: move the focused window into the
adjacent zone of a user-defined layout and track which window sits in which zone.
"""

__version__ = "1.0.0"
__author__ = "NixOS Configuration Team"
