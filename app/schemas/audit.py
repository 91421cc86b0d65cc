"""Audit schemas"""

from pydantic import BaseModel


class Actor(BaseModel):
    """User who triggered a mutation"""
    name: str
    id: int  # Platform snowflake, up to 2**64 - 1
