"""
Pydantic schemas for input validation and action outcomes.
"""
