"""Employee creation endpoint."""

from blog_server.models.user import Employee


def test_add_employee(client, app):
    res = client.post("/addnew", json={"fname": "Ada", "lname": "Lovelace"})
    assert res.status_code == 201
    assert res.text == "Employee added successfully"

    session = app.state.session_factory()
    try:
        employee = session.query(Employee).one()
    finally:
        session.close()
    assert (employee.fname, employee.lname) == ("Ada", "Lovelace")


def test_add_employee_store_failure(client, app):
    Employee.__table__.drop(app.state.engine)
    res = client.post("/addnew", json={"fname": "Ada", "lname": "Lovelace"})
    assert res.status_code == 500
