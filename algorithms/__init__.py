"""
Algorithms package for the Banker's Algorithm Allocator.
Contains the safety check, request evaluation and the allocator engine.
"""
