"""Adapters: concrete I/O implementations of core interfaces."""
