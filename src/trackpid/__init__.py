"""
Convolutional track PID inputs

This package turns a reconstructed track (its dE/dx samples, trajectory and
child particles) into the fixed-shape two-part input expected by a
pre-trained track PID network, and wraps the network scores.
"""

__version__ = "0.1.0"
