"""
Image decoding, intensity extraction and resizing.
"""
