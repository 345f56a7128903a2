"""
Auth package for the RBAC Directory.

Provides password hashing, credential verification, the access gate and the
FastAPI dependencies built on HTTP Basic Auth.
"""
