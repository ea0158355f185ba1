# cashdrawer/models/organization.py
from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from cashdrawer.database import Base

class Store(Base):
    """
    Tienda física. Cada gerente y cajero está asignado a una sola tienda.
    """
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    address = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    users = relationship("User", back_populates="store")
