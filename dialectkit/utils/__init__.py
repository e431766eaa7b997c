from dialectkit.utils import logging

__all__ = ("logging",)
