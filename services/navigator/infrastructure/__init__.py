from infrastructure.uow import UnitOfWork
from infrastructure.gateway import PersistenceGateway, Resolved

__all__ = ["UnitOfWork", "PersistenceGateway", "Resolved"]
