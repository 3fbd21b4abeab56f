"""Parsers for configuration files (``hcl``) and interpolation templates (``hil``)."""
