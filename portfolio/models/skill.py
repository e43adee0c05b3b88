from sqlalchemy import Column, Integer, String
from portfolio.database import Base

class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    level = Column(Integer, default=0, nullable=False)
    icon_name = Column(String(100))
