"""
Barrel + Verse Backend — API Routes Package
=============================================

Route Inventory:
    - auth.py:        POST /api/auth/register | login | logout, GET /api/auth/me
    - courses.py:     GET  /api/courses, /api/courses/{id}           (published only)
    - experiences.py: GET  /api/experiences, /api/experiences/{id}   (published only)
    - admin.py:       /api/admin/courses[/{id}], /api/admin/experiences[/{id}]  (admin gate)
    - purchases.py:   GET|POST /api/purchases, GET /api/purchases/{id}  (authenticated gate)
    - health.py:      GET  /health

Routes stay thin: parse input, apply a gate, call a service, return its result.
"""
