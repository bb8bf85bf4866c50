"""
sitemap_builder package initializer.
Defines package version; the CLI lives in sitemap_builder.cli.
"""
__version__ = "0.1.0"
