# blog_server/api/posts.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from blog_server.api.deps import get_current_user, get_post_owner
from blog_server.core.security import Principal
from blog_server.database import get_db, store_failure
from blog_server.models.blog import BlogPost


router = APIRouter()


class PostRequest(BaseModel):
    """
    Request schema for creating or replacing a blog post.
    """
    title: Optional[str] = None
    detail: Optional[str] = None
    category: Optional[str] = None


def _post_query(db: Session, blogid: int, owner: Optional[Principal]) -> Query:
    query = db.query(BlogPost).filter(BlogPost.blogid == blogid)
    if owner is not None:
        query = query.filter(BlogPost.userid == owner.id)
    return query


# -------------------------------
# Owner-scoped Endpoints
# -------------------------------

@router.post("/create-post", status_code=status.HTTP_201_CREATED)
def create_post(
    req: PostRequest,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    post = BlogPost(
        userid=current_user.id,
        title=req.title,
        detail=req.detail,
        category=req.category,
    )
    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError:
        raise store_failure(db, "Unable to create post", user_id=current_user.id)
    return {"message": "Post created successfully", "postId": post.blogid}


@router.get("/read-post/")
def read_posts(
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Lists every post owned by the caller, oldest first.
    """
    try:
        posts = (
            db.query(BlogPost)
            .filter(BlogPost.userid == current_user.id)
            .order_by(BlogPost.blogid)
            .all()
        )
    except SQLAlchemyError:
        raise store_failure(db, "Unable to retrieve posts", user_id=current_user.id)
    if not posts:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No posts found")
    return [post.to_dict() for post in posts]


# -------------------------------
# By-id Endpoints
# -------------------------------

@router.get("/post/{blogid}")
def read_post(
    blogid: int,
    owner: Optional[Principal] = Depends(get_post_owner),
    db: Session = Depends(get_db),
):
    try:
        post = _post_query(db, blogid, owner).first()
    except SQLAlchemyError:
        raise store_failure(db, "Error fetching blog data", blogid=blogid)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
    return post.to_dict()


@router.put("/post/{blogid}")
def update_post(
    blogid: int,
    req: PostRequest,
    owner: Optional[Principal] = Depends(get_post_owner),
    db: Session = Depends(get_db),
):
    values = {"title": req.title, "detail": req.detail, "category": req.category}
    try:
        updated = _post_query(db, blogid, owner).update(values, synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        raise store_failure(db, "Error updating the blog", blogid=blogid)
    if updated == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
    return {"message": "Blog updated successfully"}


@router.delete("/post/{blogid}")
def delete_post(
    blogid: int,
    owner: Optional[Principal] = Depends(get_post_owner),
    db: Session = Depends(get_db),
):
    try:
        deleted = _post_query(db, blogid, owner).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        raise store_failure(db, "Error deleting the blog", blogid=blogid)
    if deleted == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
    return {"message": "Blog deleted successfully"}
