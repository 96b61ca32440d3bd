"""Console client for SharePoint document libraries over Microsoft Graph."""

__version__ = "0.1.0"
