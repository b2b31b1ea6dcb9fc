"""Course CRUD endpoints."""

from fastapi import APIRouter, status

from coursemanager.api.dependencies import CourseServiceDep
from coursemanager.api.exceptions import unwrap
from coursemanager.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    course_to_response,
)

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_courses(service: CourseServiceDep) -> APIResponse[list[CourseResponse]]:
    """List all courses."""
    courses = unwrap(service.get_all_courses()) or []
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(course: CourseCreate, service: CourseServiceDep) -> APIResponse[CourseResponse]:
    """Create a new course."""
    result = service.add_course(
        course_code=course.course_code,
        title=course.title,
        credits=course.credits,
        department_id=course.department_id,
        status=course.status,
    )
    created = unwrap(result)
    return APIResponse(data=course_to_response(created), message=result.message)


@router.get("/by-code/{course_code}", response_model=APIResponse[CourseResponse])
def get_course_by_code(course_code: str, service: CourseServiceDep) -> APIResponse[CourseResponse]:
    """Get a course by course code."""
    course = unwrap(service.get_course_by_code(course_code))
    return APIResponse(data=course_to_response(course))


@router.get("/{course_id}", response_model=APIResponse[CourseResponse])
def get_course(course_id: int, service: CourseServiceDep) -> APIResponse[CourseResponse]:
    """Get a course by ID."""
    course = unwrap(service.get_course_by_id(course_id))
    return APIResponse(data=course_to_response(course))


@router.patch("/{course_id}", response_model=APIResponse[CourseResponse])
def update_course(
    course_id: int, course: CourseUpdate, service: CourseServiceDep
) -> APIResponse[CourseResponse]:
    """Update a course (partial update)."""
    result = service.update_course(
        course_id,
        course_code=course.course_code,
        title=course.title,
        credits=course.credits,
        department_id=course.department_id,
        status=course.status,
    )
    updated = unwrap(result)
    return APIResponse(data=course_to_response(updated), message=result.message)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: int, service: CourseServiceDep) -> None:
    """Delete a course."""
    unwrap(service.delete_course(course_id))
