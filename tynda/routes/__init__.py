"""
Tynda Backend — API Routes Package
===================================

Route Inventory:
    - tracks.py:     /api/tracks[/{id}]                   (public catalog CRUD)
    - playlists.py:  /api/playlists[/{id}[/tracks[/{tid}]]] (session required)
    - admin.py:      /api/admin/*                          (admin role required)
    - auth.py:       /api/auth/register|login|logout|me
    - health.py:     GET /health

Routes are thin: extract parameters, resolve the RequestContext, call a
service, return its schema. Business rules live in tynda.services.
"""
