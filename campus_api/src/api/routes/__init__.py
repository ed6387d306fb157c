"""
API route modules.

Every registered entity gets the same CRUD router, built by
entities.build_entity_router from its EntityResource. Routers are included from
src.api.main under the /api prefix.
"""
