from sqlalchemy import Column, String, JSON
from shared.config.database import Base

class OrderRecord(Base):
    __tablename__ = "orders"

    order_id = Column(String(36), primary_key=True)
    status = Column(String(32), index=True, nullable=False)
    email = Column(String(320), index=True, nullable=False) # lower-cased for case-insensitive lookup
    document = Column(JSON, nullable=False) # the full camelCase order, as served by the API
