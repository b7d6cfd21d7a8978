from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ppob_api.database import Base
from datetime import datetime


class TransactionStatus:
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"

    # Digiflazz reports "Sukses" / "Gagal"; both spellings count
    SUCCESSFUL = ("SUCCESS", "SUKSES")
    TERMINAL = ("SUCCESS", "SUKSES", "FAILED", "GAGAL")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ref_id = Column(String(64), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), index=True, nullable=True)
    buyer_sku_code = Column(String(100), nullable=True)
    customer_no = Column(String(100), nullable=True)
    status = Column(String(50), default=TransactionStatus.PENDING, index=True, nullable=False)
    sn = Column(String(255), nullable=True)
    raw_response = Column(Text, nullable=True)  # last provider payload, verbatim JSON
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="transactions")
    product = relationship("Product")

    @property
    def is_terminal(self):
        return self.status in TransactionStatus.TERMINAL

    def to_dict(self, include_relations: bool = False):
        data = {
            "id": self.id,
            "refId": self.ref_id,
            "userId": self.user_id,
            "productId": self.product_id,
            "buyerSkuCode": self.buyer_sku_code,
            "customerNo": self.customer_no,
            "status": self.status,
            "sn": self.sn,
            "rawResponse": self.raw_response,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_relations:
            data["user"] = self.user.to_dict() if self.user else None
            data["product"] = self.product.to_dict() if self.product else None
        return data
