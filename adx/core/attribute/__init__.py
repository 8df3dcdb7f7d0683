from .container import Attribute

__all__ = ["Attribute"]
