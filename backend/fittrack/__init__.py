"""
FitTrack - personal fitness and nutrition tracking backend.
"""
__version__ = "1.0.0"
