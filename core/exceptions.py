# server/core/exceptions.py
"""
Custom exceptions for the backend
"""

class AtamaError(Exception):
    """Base exception for the Atama backend"""
    pass

class AgentError(AtamaError):
    """Agent-related errors"""
    pass

class AgentConfigError(AtamaError):
    """Agent configuration errors"""
    pass

class ExternalAPIError(AtamaError):
    """External API errors"""
    pass
