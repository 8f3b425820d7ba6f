"""
SharePoint Online default sensitivity label configurator.
Enables the tenant label features and sets a library's default label.
"""

__version__ = "0.1.0"
