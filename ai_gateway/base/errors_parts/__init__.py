"""Errors parts package.

Prefer importing from ``ai_gateway.base.errors`` for the stable surface.
"""

from .error_kind import ErrorKind
from .classified_error import ClassifiedError
from .gateway_error import GatewayError
from .classification import classify

__all__ = ["ErrorKind", "ClassifiedError", "GatewayError", "classify"]
