"""Service layer — site loading, building, and inspection returning ServiceResult.

Services may import from domain, infrastructure, and config.
They must never import from commands or output.
"""
