# Shared application module
from .patch import UNSET, Patchable, is_set

__all__ = ['UNSET', 'Patchable', 'is_set']
