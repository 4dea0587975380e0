"""Session domain module.

The signed-in identity of a single client context and its storage port.
"""
