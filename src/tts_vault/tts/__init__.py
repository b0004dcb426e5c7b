"""
Speech, storage and catalog building blocks.

    - addressing.py: Content keys and voice selector parsing
    - contracts.py: Collaborator protocols and record types
    - backends/: Google and in-memory collaborator implementations
"""
