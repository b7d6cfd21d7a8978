from sqlalchemy import Column, Integer, String, Float, DateTime
from ppob_api.database import Base
from datetime import datetime


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_provider = Column(String(100), unique=True, index=True, nullable=False)  # Digiflazz buyer_sku_code
    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False)
    base_price = Column(Float, nullable=False)
    selling_price = Column(Float, nullable=False)
    profit = Column(Float, default=0.0)  # only recomputed when both prices are written
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "idProvider": self.id_provider,
            "name": self.name,
            "category": self.category,
            "base_price": self.base_price,
            "selling_price": self.selling_price,
            "profit": self.profit,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
