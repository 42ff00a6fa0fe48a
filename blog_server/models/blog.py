# blog_server/models/blog.py

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from . import Base


class BlogPost(Base):
    __tablename__ = "blog"

    blogid = Column(Integer, primary_key=True, index=True)
    userid = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String(255))
    detail = Column(Text)
    category = Column(String(255))

    def to_dict(self) -> dict:
        return {
            "blogid": self.blogid,
            "userid": self.userid,
            "title": self.title,
            "detail": self.detail,
            "category": self.category,
        }
