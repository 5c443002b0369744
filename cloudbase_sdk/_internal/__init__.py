"""Internal modules for the cloudbase.io SDK.

WARNING: This package contains system-level modules used by CloudbaseClient.
These are not intended for direct use in application code.

Modules:
    dispatch - Request builder, dispatcher, envelope decoder and session state
    json_value - Weakly-typed JSON value model
    http - Shared HTTP client configuration
"""
