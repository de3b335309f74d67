"""Policies shipped with gwimport, registered as ``gwimport.policies`` entry points."""

from gwimport.policies.builtin.json_validation import JsonValidationPolicy
from gwimport.policies.builtin.mock import MockPolicy

__all__ = ["JsonValidationPolicy", "MockPolicy"]
