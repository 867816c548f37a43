"""Numcy operations: stateless functions over Tensors."""

from .linalg import dot, matmul, outer, enorm, norm, transpose, triu
from .spatial import cosine, enorm_distance
from .random import randn, randint, shuffle
from .creation import arange, ones, zeros, tensor, from_numpy
from .elementwise import sign, sin, cos, exp, sigmoid, subtract, divide
from .reduction import sum, mean, max
from .manipulation import reshape, concatenate

__all__ = [
    # Linear algebra
    'dot', 'matmul', 'outer', 'enorm', 'norm', 'transpose', 'triu',
    # Spatial
    'cosine', 'enorm_distance',
    # Random
    'randn', 'randint', 'shuffle',
    # Creation
    'arange', 'ones', 'zeros', 'tensor', 'from_numpy',
    # Elementwise
    'sign', 'sin', 'cos', 'exp', 'sigmoid', 'subtract', 'divide',
    # Reductions
    'sum', 'mean', 'max',
    # Manipulation
    'reshape', 'concatenate',
]
