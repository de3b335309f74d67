"""JSON Schemas shipped with gwimport."""
