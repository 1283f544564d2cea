"""
Repositories package

Each repository encapsulates database operations for a model:
- user_repository.py
- property_repository.py
- favorite_repository.py

Usage:
    from estatehub.repositories.property_repository import PropertyRepository
    properties = PropertyRepository.get_all()
"""
