# Domain services
from . import pricing

__all__ = ['pricing']
