"""
Domain Logic

Query building and execution.
"""
