"""Flask blueprint package for the invoice dashboard routes.

Blueprints are defined in the sibling modules (e.g., ``invoice_routes``) and
registered in :mod:`app.__init__`.
"""
