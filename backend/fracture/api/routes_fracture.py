"""
Routes for fracture cascades and collision energy.

A fracture request breaks a stored mesh at an impact point.  The body
and every fragment the cascade creates are stored as new meshes whose
``parentId`` is the fractured mesh; the original mesh is left intact.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from .models import (
    CollisionEnergyRequest,
    CollisionEnergyResponse,
    FractureRequest,
    FractureResponse,
    FragmentInfo,
)
from .routes_meshes import mesh_info_from_record
from ..services.collisions import collision_energy, collision_energy_loss
from ..services.fragment_pool import FractureParams, RigidBodyState
from ..services.simulation import FractureSimulation
from ..services.storage import get_mesh_record_or_404, load_mesh, store_polygon_mesh

router = APIRouter()


@router.post("/meshes/{mesh_id}/fracture", response_model=FractureResponse, status_code=201)
async def fracture_mesh(mesh_id: str, body: FractureRequest) -> FractureResponse:
    """Fracture a stored mesh and store every resulting fragment.

    The response lists the fractured body first followed by the
    fragments in creation order.  Passing ``seed`` makes the cascade
    reproducible.
    """
    record = get_mesh_record_or_404(mesh_id)
    mesh = load_mesh(mesh_id)
    try:
        params = FractureParams(
            mean_fault_distance=body.meanFaultDistance,
            fracture_energy=body.fractureEnergy,
            surface_energy=body.surfaceEnergy,
            fragment_min_mass=body.fragmentMinMass,
            min_fracture_radius=body.minFractureRadius,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    state = RigidBodyState(
        mass=body.mass,
        velocity=tuple(body.velocity),
        angular_velocity=tuple(body.angularVelocity),
        drag=body.drag,
    )

    simulation = FractureSimulation(seed=body.seed)
    fragment = simulation.add_body(mesh, state, params, name=record.name or mesh_id)
    report = simulation.fracture(fragment, tuple(body.point), body.energy)

    fragments = []
    for index, piece in enumerate([fragment] + report.created):
        stored = store_polygon_mesh(
            piece.mesh,
            name=f"{record.name} fragment {index}",
            source="fracture",
            parent_id=mesh_id,
        )
        fragments.append(
            FragmentInfo(
                mesh=mesh_info_from_record(stored),
                mass=piece.body.mass,
                velocity=list(piece.body.velocity),
                angularVelocity=list(piece.body.angular_velocity),
                fractureEnabled=piece.fracture_enabled,
            )
        )
    return FractureResponse(
        meshId=mesh_id,
        fragments=fragments,
        metadata={
            "splits": report.splits,
            "failedSplits": report.failed_splits,
            "disabled": report.disabled,
            "steps": report.steps,
            "totalMass": simulation.total_mass(),
            "seed": body.seed,
        },
    )


@router.post("/collisions/energy", response_model=CollisionEnergyResponse)
async def compute_collision_energy(body: CollisionEnergyRequest) -> CollisionEnergyResponse:
    """Energy available in a collision and the energy lost through its impulse."""
    try:
        energy = collision_energy(body.mass, tuple(body.relativeVelocity), body.otherMass)
        loss = collision_energy_loss(body.mass, tuple(body.impulse), body.otherMass)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return CollisionEnergyResponse(energy=energy, energyLoss=loss)
