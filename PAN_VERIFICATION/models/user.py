from sqlalchemy import Column, Integer, String
from core.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(150), nullable=False)
    email = Column(String(120), nullable=False, index=True)
    # plaintext on purpose: mock store only
    password = Column(String(128), nullable=False)
