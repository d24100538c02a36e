"""
chatstyle core: formula language, markup tree and renderer.
"""
