"""Claims and request/response models."""

from .claims import AuthContext, TokenPayload, TokenType

__all__ = ["AuthContext", "TokenPayload", "TokenType"]
