"""
Colour assignment and rendering helpers for community graphs.
"""

from .colors import RGBA, assign_colors, node_colors
from .render import render_payload, circular_layout, draw_graph
