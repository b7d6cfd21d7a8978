from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ppob_api.database import Base
from datetime import datetime


class Branch(Base):
    """Cooperative branch (cabang koperasi)"""
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    nasabah = relationship("Nasabah", back_populates="branch", cascade="all, delete-orphan")

    def to_dict(self, include_nasabah: bool = False):
        data = {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_nasabah:
            data["nasabah"] = [n.to_dict() for n in self.nasabah]
        return data


class Nasabah(Base):
    """Branch customer"""
    __tablename__ = "nasabah"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    balance = Column(Float, default=0.0)
    phone = Column(String(30), nullable=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    branch = relationship("Branch", back_populates="nasabah")

    def to_dict(self, include_branch: bool = False):
        data = {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
            "phone": self.phone,
            "branchId": self.branch_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_branch:
            data["branch"] = self.branch.to_dict() if self.branch else None
        return data
