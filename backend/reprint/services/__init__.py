# Services package init
"""
Reprint Backend — Services Layer
==================================

Service Inventory:
    - CatalogQuery (query_builder): filter → page statement + count statement
    - CatalogService: listing, CRUD, and statistics over the books table
    - CredentialStore (abstract) with StaticCredentialStore and
      DatabaseCredentialStore
    - AuthService: login/signup envelope over a CredentialStore
"""
