"""
Face recognition primitives: descriptor matching and embedding providers.
"""

from .matcher import MatchResult, compare_faces, euclidean_distance, find_best_match

__all__ = [
    'MatchResult',
    'compare_faces',
    'euclidean_distance',
    'find_best_match',
]

# Providers import OpenCV/dlib; import them explicitly from .provider where needed.
