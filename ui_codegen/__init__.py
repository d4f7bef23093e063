"""
ui-codegen: generate framework components and pages from UI schemas.
"""

__version__ = "0.1.0"
