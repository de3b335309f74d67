"""Draft generator -- turn an adapted spec into the parts of an API draft.

This sub-package is responsible for the second half of the gwimport pipeline:
taking a :class:`~gwimport.models.AdaptedSpec` (produced by a version adapter)
and computing the pieces :class:`~gwimport.importer.ApiImporter` assembles
into an :class:`~gwimport.models.ApiDraft`.

Sub-modules:

* :mod:`~gwimport.generator.targets` -- Expand server URL templates into
  endpoint targets and derive the virtual host path.
* :mod:`~gwimport.generator.paths` -- Group operations by path template and
  build one rule per method, optionally carrying a generated policy.
* :mod:`~gwimport.generator.extensions` -- Read the vendor definition
  extension (groups, tags, metadata, visibility...).
"""

from gwimport.generator.extensions import map_extensions
from gwimport.generator.paths import build_paths
from gwimport.generator.targets import expand_server_url, resolve_targets

__all__ = ["build_paths", "expand_server_url", "map_extensions", "resolve_targets"]
