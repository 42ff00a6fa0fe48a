# blog_server/api/health.py

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse


router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Hello World!"


@router.get("/test", response_class=PlainTextResponse)
def test_url():
    return "Test URL!"
