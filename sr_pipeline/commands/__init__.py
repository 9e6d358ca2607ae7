"""
CLI command implementations
"""
