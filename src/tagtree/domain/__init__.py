"""Domain layer — entity model, hierarchy types, and enums.

Pure Python with no I/O; consumed by the layout core and the services.
"""
