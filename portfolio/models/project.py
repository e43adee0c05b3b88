from sqlalchemy import Column, Integer, String, Text, Boolean, JSON
from portfolio.database import Base

class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    technologies = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500))
    demo_url = Column(String(500))
    repo_url = Column(String(500))
    featured = Column(Boolean, default=False, nullable=False, index=True)
    order = Column(Integer, default=0, nullable=False)
