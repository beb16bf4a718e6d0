# Services package init
"""
Inkpost Backend — Services Layer (Data Access Layer)
======================================================

What:  The database operations behind every route.
How:   Stateless singletons; each method takes the request's AsyncSession as
       its first argument and returns Pydantic schemas or raises an
       InkpostError subclass.

Service Inventory:
    - PostService:    list published, get by id, create, update, delete
    - CommentService: list by post, create, delete
    - UserService:    register, login
"""
