"""Enrollment workflow endpoints."""

from fastapi import APIRouter, Query, status

from coursemanager.api.dependencies import EnrollmentServiceDep
from coursemanager.api.exceptions import unwrap
from coursemanager.api.models import (
    APIResponse,
    EnrollmentCreate,
    EnrollmentReportResponse,
    EnrollmentResponse,
    GradeAssign,
    enrollment_to_response,
    report_row_to_response,
)

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get("", response_model=APIResponse[list[EnrollmentResponse]])
def list_enrollments(
    service: EnrollmentServiceDep,
    student_id: int | None = Query(default=None, description="Filter by student ID"),
    course_id: int | None = Query(default=None, description="Filter by course ID"),
) -> APIResponse[list[EnrollmentResponse]]:
    """List enrollments with optional filters."""
    if student_id is not None:
        enrollments = unwrap(service.get_enrollments_by_student(student_id)) or []
        if course_id is not None:
            enrollments = [e for e in enrollments if e.course_id == course_id]
    elif course_id is not None:
        enrollments = unwrap(service.get_enrollments_by_course(course_id)) or []
    else:
        enrollments = unwrap(service.get_all_enrollments()) or []
    return APIResponse(data=[enrollment_to_response(e) for e in enrollments])


@router.get("/report", response_model=APIResponse[list[EnrollmentReportResponse]])
def enrollment_report(
    service: EnrollmentServiceDep,
) -> APIResponse[list[EnrollmentReportResponse]]:
    """Every enrollment with student name and course title."""
    rows = unwrap(service.enrollment_report()) or []
    return APIResponse(data=[report_row_to_response(r) for r in rows])


@router.post(
    "",
    response_model=APIResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def enroll_student(
    enrollment: EnrollmentCreate, service: EnrollmentServiceDep
) -> APIResponse[EnrollmentResponse]:
    """Enroll a student in a course."""
    result = service.enroll_student(
        enrollment.student_id, enrollment.course_id, enrollment.enroll_date
    )
    created = unwrap(result)
    return APIResponse(data=enrollment_to_response(created), message=result.message)


@router.get("/{student_id}/{course_id}", response_model=APIResponse[EnrollmentResponse])
def get_enrollment(
    student_id: int, course_id: int, service: EnrollmentServiceDep
) -> APIResponse[EnrollmentResponse]:
    """Get one enrollment."""
    enrollment = unwrap(service.get_enrollment(student_id, course_id))
    return APIResponse(data=enrollment_to_response(enrollment))


@router.put("/{student_id}/{course_id}/grade", response_model=APIResponse[EnrollmentResponse])
def assign_grade(
    student_id: int, course_id: int, body: GradeAssign, service: EnrollmentServiceDep
) -> APIResponse[EnrollmentResponse]:
    """Assign or change a grade."""
    result = service.assign_grade(student_id, course_id, body.grade)
    enrollment = unwrap(result)
    return APIResponse(data=enrollment_to_response(enrollment), message=result.message)


@router.post(
    "/{student_id}/{course_id}/finalize", response_model=APIResponse[EnrollmentResponse]
)
def finalize_grade(
    student_id: int, course_id: int, service: EnrollmentServiceDep
) -> APIResponse[EnrollmentResponse]:
    """Finalize a grade."""
    result = service.finalize_grade(student_id, course_id)
    enrollment = unwrap(result)
    return APIResponse(data=enrollment_to_response(enrollment), message=result.message)


@router.delete("/{student_id}/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def unenroll_student(student_id: int, course_id: int, service: EnrollmentServiceDep) -> None:
    """Remove an enrollment."""
    unwrap(service.unenroll_student(student_id, course_id))
