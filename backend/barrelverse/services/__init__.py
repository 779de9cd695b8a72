"""
Barrel + Verse Backend — Services Layer
=========================================

What:  Business rules between routes (HTTP) and storage (persistence).
How:   Services are stateless singletons; the Storage and SessionContext
       they operate on are passed in on every call, so tests can hand them
       a MemoryStorage and a plain dict.

Service Inventory:
    - AuthService:     register, login, logout, current user
    - CatalogService:  public (published-only) and admin views of courses
                       and experiences
    - PurchaseService: purchases scoped to the session's user
"""
