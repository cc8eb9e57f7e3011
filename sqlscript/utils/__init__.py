from sqlscript.utils import logging

__all__ = ("logging",)
