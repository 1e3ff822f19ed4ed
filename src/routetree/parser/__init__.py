"""CSDL parser -- load a document, resolve type names, and build the schema model.

This sub-package is responsible for the first half of the routetree pipeline:
turning a raw OData CSDL JSON document (JSON or YAML, local file or remote
URL) into a :class:`~routetree.models.SchemaModel` that the route-tree
generator can traverse.

Typical usage::

    from routetree.parser import load_schema, validate_csdl_version, extract_schema

    raw = load_schema("https://example.com/odata/$metadata?$format=json")
    version = validate_csdl_version(raw)
    model = extract_schema(raw, version)

Sub-modules:

* :mod:`~routetree.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and CSDL version validation.
* :mod:`~routetree.parser.resolver` -- Namespace alias handling and
  qualified-name normalisation.
* :mod:`~routetree.parser.extractor` -- Walks the document and produces the
  :class:`~routetree.models.SchemaModel`.
"""

from routetree.parser.extractor import extract_schema
from routetree.parser.loader import load_schema, validate_csdl_version

__all__ = ["load_schema", "validate_csdl_version", "extract_schema"]
