"""
FastAPI Backend for the Numberwise Dashboard

Provides REST API endpoints for the dashboard frontend. Build the application
with ``numberwise.api.main.create_app``.
"""
