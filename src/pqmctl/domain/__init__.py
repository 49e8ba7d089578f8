"""Domain layer — argument encodings and amount arithmetic.

Pure functions and value types. No I/O, no imports from infrastructure,
services, or commands.
"""
