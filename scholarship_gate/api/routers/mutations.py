"""Mutations API router: insert/update/delete on a table through the protected-resource gateway."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from scholarship_gate.api.dependencies import get_actor, get_correlation_id, get_gateway
from scholarship_gate.application.gateway import ProtectedResourceGateway
from scholarship_gate.domain.models.mutation import MutationKind, MutationRequest, MutationResult
from scholarship_gate.domain.schemas.mutation import (
    DeleteRequest,
    InsertRequest,
    MutationResponse,
    UpdateRequest,
)

router = APIRouter()


def _to_response(request: Request, result: MutationResult) -> MutationResponse:
    request.state.audit_id = result.audit_id
    return MutationResponse(
        resource=result.resource,
        operation=result.operation,
        rows_affected=result.rows_affected,
        audit_id=result.audit_id,
    )


@router.post("/{resource}", response_model=MutationResponse)
async def insert_row(
    resource: str,
    body: InsertRequest,
    request: Request,
    actor: Annotated[str, Depends(get_actor)],
    correlation_id: Annotated[str, Depends(get_correlation_id)],
    gateway: Annotated[ProtectedResourceGateway, Depends(get_gateway)],
):
    """Insert one row. 403 when the write window is closed."""
    result = await gateway.submit(
        MutationRequest(
            resource=resource,
            kind=MutationKind.INSERT,
            actor=actor,
            values=body.values,
            correlation_id=correlation_id,
        )
    )
    return _to_response(request, result)


@router.patch("/{resource}", response_model=MutationResponse)
async def update_rows(
    resource: str,
    body: UpdateRequest,
    request: Request,
    actor: Annotated[str, Depends(get_actor)],
    correlation_id: Annotated[str, Depends(get_correlation_id)],
    gateway: Annotated[ProtectedResourceGateway, Depends(get_gateway)],
):
    """Update rows matching criteria (one statement, one audit record)."""
    result = await gateway.submit(
        MutationRequest(
            resource=resource,
            kind=MutationKind.UPDATE,
            actor=actor,
            values=body.values,
            criteria=body.criteria,
            correlation_id=correlation_id,
        )
    )
    return _to_response(request, result)


@router.delete("/{resource}", response_model=MutationResponse)
async def delete_rows(
    resource: str,
    body: DeleteRequest,
    request: Request,
    actor: Annotated[str, Depends(get_actor)],
    correlation_id: Annotated[str, Depends(get_correlation_id)],
    gateway: Annotated[ProtectedResourceGateway, Depends(get_gateway)],
):
    result = await gateway.submit(
        MutationRequest(
            resource=resource,
            kind=MutationKind.DELETE,
            actor=actor,
            criteria=body.criteria,
            correlation_id=correlation_id,
        )
    )
    return _to_response(request, result)
