# blog_server/api/auth.py

from pathlib import Path
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_server.api.deps import get_current_user, get_token_codec
from blog_server.core.security import PasswordHasher, Principal, TokenCodec
from blog_server.core.storage import discard_picture, save_picture
from blog_server.database import get_db, store_failure
from blog_server.models.user import User


logger = structlog.get_logger(__name__)

router = APIRouter()


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    token: str


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


# -------------------------------
# Registration & Login
# -------------------------------

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
):
    hashed = hasher.hash(req.password)
    try:
        db.add(User(email=req.email, password=hashed, name=req.name))
        db.commit()
    except SQLAlchemyError:
        raise store_failure(db, "Error registering user")
    logger.info("user_registered", email=req.email)
    return PlainTextResponse("User registered", status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=Token)
def login(
    req: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    codec: TokenCodec = Depends(get_token_codec),
):
    try:
        user = db.query(User).filter(User.email == req.email).first()
    except SQLAlchemyError:
        raise store_failure(db, "Server error")

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not hasher.verify(req.password, user.password):
        logger.warning("login_failed", user_id=user.id, reason="bad_password")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")

    token = codec.issue(Principal(id=user.id, email=user.email).to_claims())
    return {"token": token}


# -------------------------------
# Account
# -------------------------------

@router.get("/account")
def read_account(
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = db.get(User, current_user.id)
    except SQLAlchemyError:
        raise store_failure(db, "Server error", user_id=current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user.profile()


@router.put("/update-account")
def update_account(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    picture: Optional[UploadFile] = File(None),
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # TODO: reject non-image uploads and cap their size before writing to disk.
    upload_dir = Path(request.app.state.settings.upload_dir)
    values = {"name": name, "email": email}
    if picture is not None and picture.filename:
        values["picture"] = save_picture(picture, upload_dir)

    try:
        updated = (
            db.query(User)
            .filter(User.id == current_user.id)
            .update(values, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        if "picture" in values:
            discard_picture(values["picture"], upload_dir)
        raise store_failure(db, "Server error", user_id=current_user.id)

    if updated == 0:
        if "picture" in values:
            discard_picture(values["picture"], upload_dir)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User not found")
    return {"message": "User info updated successfully"}
