"""
Gradient, cell histogram and block descriptor computation.
"""
