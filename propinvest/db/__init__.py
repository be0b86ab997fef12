from .property_store import PropertyStore, property_store, get_property_store

__all__ = ["PropertyStore", "property_store", "get_property_store"]
