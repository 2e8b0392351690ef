"""Loader interception helpers."""

from .chain import InterceptedLoader, MiddlewareChain, settle
from .loading import LoadingProgress

__all__ = ["InterceptedLoader", "LoadingProgress", "MiddlewareChain", "settle"]
