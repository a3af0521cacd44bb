"""
Bridge error types.
"""

from typing import Any, Optional


class BridgeError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class HostDataError(BridgeError):
    def __init__(self, message: str, code: str = "host_data_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ConfigurationError(BridgeError):
    def __init__(self, message: str):
        super().__init__("configuration_error", message)
