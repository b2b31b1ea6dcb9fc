"""Department CRUD endpoints."""

from fastapi import APIRouter, status

from coursemanager.api.dependencies import DepartmentServiceDep
from coursemanager.api.exceptions import unwrap
from coursemanager.api.models import (
    APIResponse,
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    department_to_response,
)

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=APIResponse[list[DepartmentResponse]])
def list_departments(service: DepartmentServiceDep) -> APIResponse[list[DepartmentResponse]]:
    """List all departments."""
    departments = unwrap(service.get_all_departments()) or []
    return APIResponse(data=[department_to_response(d) for d in departments])


@router.post(
    "",
    response_model=APIResponse[DepartmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_department(
    department: DepartmentCreate, service: DepartmentServiceDep
) -> APIResponse[DepartmentResponse]:
    """Create a new department."""
    result = service.add_department(name=department.name, description=department.description)
    created = unwrap(result)
    return APIResponse(data=department_to_response(created), message=result.message)


@router.get("/{department_id}", response_model=APIResponse[DepartmentResponse])
def get_department(
    department_id: int, service: DepartmentServiceDep
) -> APIResponse[DepartmentResponse]:
    """Get a department by ID."""
    department = unwrap(service.get_department_by_id(department_id))
    return APIResponse(data=department_to_response(department))


@router.patch("/{department_id}", response_model=APIResponse[DepartmentResponse])
def update_department(
    department_id: int, department: DepartmentUpdate, service: DepartmentServiceDep
) -> APIResponse[DepartmentResponse]:
    """Update a department (partial update)."""
    result = service.update_department(
        department_id, name=department.name, description=department.description
    )
    updated = unwrap(result)
    return APIResponse(data=department_to_response(updated), message=result.message)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(department_id: int, service: DepartmentServiceDep) -> None:
    """Delete a department."""
    unwrap(service.delete_department(department_id))
