"""
Index pruning workflow.
"""
from .index_pruner import RESERVED_INDEX, IndexPruner, default_index_filter

__all__ = ['IndexPruner', 'RESERVED_INDEX', 'default_index_filter']
