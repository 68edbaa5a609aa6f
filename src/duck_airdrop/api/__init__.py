"""HTTP API subpackage for the DUCK airdrop service.

Exposes the FastAPI application factory and the claim endpoint.
"""

__all__: list[str] = []
