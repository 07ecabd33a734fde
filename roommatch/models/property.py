# property.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, JSON, String, Text
from roommatch.database import Base


class PropertyListing(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    location = Column(String(255), nullable=False)
    room_type = Column(String(32), nullable=False)

    image_urls = Column(JSON, nullable=False, default=list)
    amenities = Column(JSON, nullable=False, default=list)

    available = Column(Boolean, nullable=False, default=True)
