"""
Azure Container Apps collaborators: session, discovery and lifecycle calls.

Modules here import the Azure SDK, so they are loaded only after the
dependency check has run.
"""
