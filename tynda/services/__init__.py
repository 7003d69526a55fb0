"""
Tynda Backend — Services Layer
===============================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Each service is constructed per request around that request's
       AsyncSession (see tynda.dependencies) and raises tynda.exceptions
       errors that the global handlers turn into HTTP responses.

Service Inventory:
    - TrackService:    catalog CRUD, filter/sort/projection
    - PlaylistService: playlist CRUD, ownership, membership set
    - AdminService:    stats, user roles/deletion, all-playlist listing
    - AuthService:     registration, login, super-admin bootstrap
"""
