from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from . import Base

DISPLAY_NAME_MAX_LENGTH = 20
BIO_MAX_LENGTH = 190

class Profile(Base):
    __tablename__ = 'profiles'
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), unique=True, index=True, nullable=False)
    display_name = Column(String(DISPLAY_NAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    bio = Column(String(BIO_MAX_LENGTH), nullable=False, default='')
    # False once the user uploaded a custom picture stored under their own key
    default_picture = Column(Boolean, nullable=False, default=True)
