"""Student CRUD endpoints."""

from fastapi import APIRouter, status

from coursemanager.api.dependencies import StudentServiceDep
from coursemanager.api.exceptions import unwrap
from coursemanager.api.models import (
    APIResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
    student_to_response,
)

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=APIResponse[list[StudentResponse]])
def list_students(service: StudentServiceDep) -> APIResponse[list[StudentResponse]]:
    """List all students."""
    students = unwrap(service.get_all_students()) or []
    return APIResponse(data=[student_to_response(s) for s in students])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    student: StudentCreate, service: StudentServiceDep
) -> APIResponse[StudentResponse]:
    """Create a new student."""
    result = service.add_student(
        student_code=student.student_code,
        full_name=student.full_name,
        department_id=student.department_id,
        date_of_birth=student.date_of_birth,
        email=student.email,
        is_active=student.is_active,
    )
    created = unwrap(result)
    return APIResponse(data=student_to_response(created), message=result.message)


@router.get("/by-code/{student_code}", response_model=APIResponse[StudentResponse])
def get_student_by_code(
    student_code: str, service: StudentServiceDep
) -> APIResponse[StudentResponse]:
    """Get a student by student code."""
    student = unwrap(service.get_student_by_code(student_code))
    return APIResponse(data=student_to_response(student))


@router.get("/{student_id}", response_model=APIResponse[StudentResponse])
def get_student(student_id: int, service: StudentServiceDep) -> APIResponse[StudentResponse]:
    """Get a student by ID."""
    student = unwrap(service.get_student_by_id(student_id))
    return APIResponse(data=student_to_response(student))


@router.patch("/{student_id}", response_model=APIResponse[StudentResponse])
def update_student(
    student_id: int, student: StudentUpdate, service: StudentServiceDep
) -> APIResponse[StudentResponse]:
    """Update a student (partial update)."""
    result = service.update_student(
        student_id,
        student_code=student.student_code,
        full_name=student.full_name,
        email=student.email,
        department_id=student.department_id,
        date_of_birth=student.date_of_birth,
        is_active=student.is_active,
    )
    updated = unwrap(result)
    return APIResponse(data=student_to_response(updated), message=result.message)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: int, service: StudentServiceDep) -> None:
    """Delete a student."""
    unwrap(service.delete_student(student_id))
