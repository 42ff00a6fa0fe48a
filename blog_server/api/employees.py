# blog_server/api/employees.py

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_server.database import get_db, store_failure
from blog_server.models.user import Employee


router = APIRouter()


class EmployeeRequest(BaseModel):
    fname: str
    lname: str


@router.post("/addnew", status_code=status.HTTP_201_CREATED)
def add_employee(req: EmployeeRequest, db: Session = Depends(get_db)):
    try:
        db.add(Employee(fname=req.fname, lname=req.lname))
        db.commit()
    except SQLAlchemyError:
        raise store_failure(db, "Error adding employee")
    return PlainTextResponse("Employee added successfully", status_code=status.HTTP_201_CREATED)
