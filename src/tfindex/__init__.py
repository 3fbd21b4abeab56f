"""terraform-index - declaration and reference index for Terraform sources."""

__version__ = "1.2.0"
