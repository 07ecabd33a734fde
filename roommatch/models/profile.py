# profile.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text, func
from sqlalchemy.orm import relationship
from roommatch.database import Base


class UserProfileModel(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    full_name = Column(String(255), nullable=True)
    age = Column(Integer, nullable=True)
    occupation = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    ideal_location = Column(String(255), nullable=True)
    budget = Column(Integer, nullable=True)

    # Ordered string lists (Postgres arrays in the original schema).
    hobbies = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    roommate_qualities = Column(JSON, nullable=False, default=list)

    lifestyle = Column(String(32), nullable=True)
    cleanliness = Column(String(32), nullable=True)
    smoking_preference = Column(String(32), nullable=True)
    pet_preference = Column(String(32), nullable=True)
    additional_info = Column(Text, nullable=True)

    profile_complete = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref="profile_record")
