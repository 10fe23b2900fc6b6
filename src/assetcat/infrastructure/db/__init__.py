from .pool import ConnectionPool
from .schema import ensure_schema, initialize_schema
from .unit_of_work import UnitOfWork

__all__ = ["ConnectionPool", "UnitOfWork", "ensure_schema", "initialize_schema"]
