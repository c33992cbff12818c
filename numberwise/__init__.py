"""
Numberwise Dashboard

Status dashboard backend for the Zenvoices and accounting pipelines.
"""

__version__ = "1.0.0"
