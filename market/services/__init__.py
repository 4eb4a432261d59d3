# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access:
#
#   auth_service     — registration, login, token refresh
#   user_service     — self-service profile, password, my/liked products
#   article_service  — CRUD + list cache for Article
#   product_service  — CRUD + list cache for Product
#   comment_service  — comments under articles / products
#   ownership        — owner-gated conditional update / delete
#   pagination       — keyset cursor pagination for comments
#   likes            — like toggling and like summaries
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``market.errors`` types.
