from .inventory_repository import InventoryRepository

__all__ = [
    'InventoryRepository',
]
