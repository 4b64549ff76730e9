"""
Rowflow: dataflow graph resolution for visual pipeline editors.

Given a snapshot of nodes and edges wired on a canvas, computes the rows
visible at any node by walking the graph backward from it.
"""

__version__ = "0.1.0"
