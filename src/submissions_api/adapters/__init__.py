"""
Adapter layer for the Submissions API.

Contains the storage abstraction (S3 or disabled) selected once per process from the deployment mode.
"""
