"""
Table gateway implementations live here (infra adapters).

NOTE: Import adapters directly from their module (e.g.
`infra.gateway.rest_gateway import RestTableGateway`) so that choosing one
backend does not import the other's dependencies.
"""

__all__ = []
