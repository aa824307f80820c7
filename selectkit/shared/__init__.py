"""
Shared Components

Types used across the selectkit package.
"""
