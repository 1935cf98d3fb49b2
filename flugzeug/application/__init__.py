"""
Application layer module.

Use-case services and the interfaces they depend on.
"""
