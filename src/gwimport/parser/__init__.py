"""Descriptor parser -- load raw content, detect its version, resolve ``$ref`` pointers.

This sub-package is responsible for the first stage of the gwimport pipeline:
turning an :class:`~gwimport.models.ImportDescriptor` into a parsed document
and its :class:`~gwimport.models.SpecVersion`, ready for a version adapter.

Typical usage::

    from gwimport.parser import load_source, parse_document

    text = load_source(descriptor)
    document, version = parse_document(text)

Sub-modules:

* :mod:`~gwimport.parser.loader` -- I/O layer (URL, file, inline payload).
* :mod:`~gwimport.parser.detector` -- JSON/YAML probing and version detection.
* :mod:`~gwimport.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection.
"""

from gwimport.parser.detector import parse_document
from gwimport.parser.loader import load_source
from gwimport.parser.resolver import resolve_refs

__all__ = ["load_source", "parse_document", "resolve_refs"]
