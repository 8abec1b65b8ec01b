#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
BF2 Migrator - Consolidated Exception Classes

This module contains all exception classes used in the project,
centralized in one place to avoid duplication and improve consistency.
"""

from datetime import datetime
from typing import Dict, Any, Iterable, Optional


class BaseError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Configuration-related errors
# =====================================================================================================

class ConfigurationError(BaseError):
    """Base class for configuration errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = str(file_path)
        super().__init__(message, error_code or "CONFIG_ERROR", config_details)


class ValidationError(ConfigurationError):
    """Raised when configuration or user input validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 expected_type: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        validation_details = details or {}
        if field_name:
            validation_details['field_name'] = field_name
        if expected_type:
            validation_details['expected_type'] = expected_type
        super().__init__(message, "VALIDATION_ERROR", None, validation_details)


# =====================================================================================================
# Patching errors
# =====================================================================================================

class PatchError(BaseError):
    """Base class for errors while detecting or patching a binary."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_name: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        patch_details = details or {}
        if file_name:
            patch_details['file_name'] = file_name
        super().__init__(message, error_code or "PATCH_ERROR", patch_details)


class TargetNotPresentError(PatchError):
    """Raised when a patch target does not exist in the install directory."""

    def __init__(self, message: str, file_name: Optional[str] = None,
                 path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        target_details = details or {}
        if path:
            target_details['path'] = str(path)
        super().__init__(message, "TARGET_NOT_PRESENT", file_name, target_details)


class UnknownOrMixedStateError(PatchError):
    """Raised when a binary matches no provider fingerprint or more than one."""

    def __init__(self, message: str, file_name: Optional[str] = None,
                 matches: Optional[Iterable[Any]] = None,
                 details: Optional[Dict[str, Any]] = None):
        state_details = details or {}
        state_details['matches'] = [str(m) for m in (matches or [])]
        super().__init__(message, "UNKNOWN_OR_MIXED_STATE", file_name, state_details)


class MissingFingerprintError(PatchError):
    """Raised when a provider has no fingerprint configured for a target."""

    def __init__(self, message: str, file_name: Optional[str] = None,
                 provider: Optional[Any] = None,
                 details: Optional[Dict[str, Any]] = None):
        fp_details = details or {}
        if provider is not None:
            fp_details['provider'] = str(provider)
        super().__init__(message, "MISSING_FINGERPRINT", file_name, fp_details)


class OccurrenceMismatchError(PatchError):
    """Raised when a modification's pattern count differs from the expected count."""

    def __init__(self, message: str, file_name: Optional[str] = None,
                 rule_index: Optional[int] = None,
                 expected: Optional[int] = None,
                 observed: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        rule_details = details or {}
        if rule_index is not None:
            rule_details['rule_index'] = rule_index
        if expected is not None:
            rule_details['expected'] = expected
        if observed is not None:
            rule_details['observed'] = observed
        super().__init__(message, "OCCURRENCE_MISMATCH", file_name, rule_details)


class LengthInvariantError(PatchError):
    """Raised when a patched buffer no longer has the original length."""

    def __init__(self, message: str, file_name: Optional[str] = None,
                 original_size: Optional[int] = None,
                 patched_size: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        size_details = details or {}
        if original_size is not None:
            size_details['original_size'] = original_size
        if patched_size is not None:
            size_details['patched_size'] = patched_size
        super().__init__(message, "LENGTH_INVARIANT", file_name, size_details)


class PatchLockError(PatchError):
    """Raised when another live process holds the patch lock for a file."""

    def __init__(self, message: str, file_name: Optional[str] = None,
                 owner_pid: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        lock_details = details or {}
        if owner_pid is not None:
            lock_details['owner_pid'] = owner_pid
        super().__init__(message, "PATCH_LOCKED", file_name, lock_details)


# =====================================================================================================
# Process errors
# =====================================================================================================

class ProcessError(BaseError):
    """Base class for errors while stopping game processes."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "PROCESS_ERROR", details)


class ProcessTerminationError(ProcessError):
    """Raised when a kill request for a process fails."""

    def __init__(self, message: str, pid: Optional[int] = None,
                 name: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        proc_details = details or {}
        if pid is not None:
            proc_details['pid'] = pid
        if name:
            proc_details['name'] = name
        super().__init__(message, "PROCESS_TERMINATION_FAILED", proc_details)


class ProcessTerminationTimeoutError(ProcessError):
    """Raised when killed processes did not exit within the polling window."""

    def __init__(self, message: str, pending: Optional[Dict[int, str]] = None,
                 details: Optional[Dict[str, Any]] = None):
        timeout_details = details or {}
        timeout_details['pending'] = dict(pending or {})
        super().__init__(message, "PROCESS_TERMINATION_TIMEOUT", timeout_details)


# =====================================================================================================
# Environment lookup errors (install directory, registry)
# =====================================================================================================

class EnvironmentLookupError(BaseError):
    """Base class for errors while inspecting the local installation."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "ENVIRONMENT_ERROR", details)


class InstallDirNotFoundError(EnvironmentLookupError):
    """Raised when no game install directory could be determined."""

    def __init__(self, message: str, tried: Optional[Iterable[str]] = None,
                 details: Optional[Dict[str, Any]] = None):
        dir_details = details or {}
        dir_details['tried'] = list(tried or [])
        super().__init__(message, "INSTALL_DIR_NOT_FOUND", dir_details)


class RegistryKeyNotFoundError(EnvironmentLookupError):
    """Raised when a registry key or value does not exist."""

    def __init__(self, message: str, key_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        key_details = details or {}
        if key_path:
            key_details['key_path'] = key_path
        super().__init__(message, "REGISTRY_KEY_NOT_FOUND", key_details)


class RegistryUnavailableError(EnvironmentLookupError):
    """Raised when the Windows registry cannot be used on this platform."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "REGISTRY_UNAVAILABLE", details)


class ProfileNotFoundError(EnvironmentLookupError):
    """Raised when a game profile cannot be found or read."""

    def __init__(self, message: str, profile: Optional[str] = None,
                 profiles_dir: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        profile_details = details or {}
        if profile:
            profile_details['profile'] = profile
        if profiles_dir:
            profile_details['profiles_dir'] = str(profiles_dir)
        super().__init__(message, "PROFILE_NOT_FOUND", profile_details)


# =====================================================================================================
# Backend client errors
# =====================================================================================================

class ClientError(BaseError):
    """Base class for backend account client errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "CLIENT_ERROR", details)


class RequestError(ClientError):
    """Raised when a backend request returns a non-OK status code."""

    def __init__(self, request_url: str, status_code: int,
                 details: Optional[Dict[str, Any]] = None):
        req_details = details or {}
        req_details['request_url'] = request_url
        req_details['status_code'] = status_code
        self.request_url = request_url
        self.status_code = status_code
        super().__init__(
            f"request to {request_url} failed with status code {status_code}",
            "REQUEST_FAILED",
            req_details,
        )


class APIError(ClientError):
    """Raised when the backend answers with an error object."""

    def __init__(self, code: str, message: str,
                 details: Optional[Dict[str, Any]] = None):
        api_details = details or {}
        api_details['api_code'] = code
        self.code = code
        self.api_message = message
        super().__init__(f"{message} ({code})", "API_ERROR", api_details)


class AuthenticationError(ClientError):
    """Raised when an authenticated call is made without credentials."""

    def __init__(self, message: str = "no authentication details configured",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "NOT_AUTHENTICATED", details)


class UnexpectedResponseError(ClientError):
    """Raised when a backend answers with a body of an unexpected shape."""

    def __init__(self, request_url: str, expected: str,
                 details: Optional[Dict[str, Any]] = None):
        resp_details = details or {}
        resp_details['request_url'] = request_url
        resp_details['expected'] = expected
        self.request_url = request_url
        super().__init__(
            f"unexpected response from {request_url}, expected {expected}",
            "UNEXPECTED_RESPONSE",
            resp_details,
        )
