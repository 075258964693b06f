from busalert.db.redis_client import BusAlertStore, init_store

__all__ = ["BusAlertStore", "init_store"]
