# blog_server/models/user.py

from sqlalchemy import Column, Integer, String
from . import Base


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Registered account. `password` holds the bcrypt digest, never the plaintext.
    `picture` is the public path of the uploaded profile image, if any.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(255))
    picture = Column(String(255), nullable=True)

    def profile(self) -> dict:
        return {"email": self.email, "name": self.name, "picture": self.picture}


# -------------------------------
# Employee Model
# -------------------------------

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    fname = Column(String(255))
    lname = Column(String(255))
