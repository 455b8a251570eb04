"""
Loaders for every supported input format, see LOADERS
"""
from .enum import Format
from .loaders import LOADERS
