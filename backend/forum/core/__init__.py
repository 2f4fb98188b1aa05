# forum/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: JSON error responses ({"error": message}) for every failure
- security: Password hashing and session tokens
"""
