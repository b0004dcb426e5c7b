"""
Utility Modules for tts-vault.

    - timeit.py: Stage timing
"""
