"""
Pydantic data models for the fracture service API.

These models define the shapes of requests and responses used by the
backend.  Vectors travel as three element lists; meshes travel either
as triangle soups (input) or as flat render buffers plus the sentinel
terminated loop stream (output).
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Three component vector (x, y, z)
Vec3List = Annotated[List[float], Field(min_length=3, max_length=3)]


class TriangleMeshRequest(BaseModel):
    """Triangle soup to be merged into convex polygon loops."""

    name: str = Field(default="", description="Display name of the mesh")
    vertices: List[float] = Field(..., description="Flat list of vertex positions (x, y, z …)")
    indices: List[int] = Field(..., description="Triangle index buffer, three indices per triangle")
    normals: Optional[List[float]] = Field(
        default=None, description="Optional flat list of vertex normals; computed when omitted"
    )
    uvs: Optional[List[float]] = Field(
        default=None, description="Optional flat list of texture coordinates (u, v …)"
    )


class BoxRequest(BaseModel):
    """Parameters for an axis aligned box primitive."""

    name: str = Field(default="Box", description="Display name of the mesh")
    size: Vec3List = Field(default=[1.0, 1.0, 1.0], description="Edge lengths along x, y, z")
    center: Vec3List = Field(default=[0.0, 0.0, 0.0], description="Centre of the box")


class SplitRequest(BaseModel):
    """A cutting plane given by a normal and either a distance or a point."""

    normal: Vec3List = Field(..., description="Plane normal; normalised by the server")
    distance: Optional[float] = Field(
        default=None, description="Plane distance such that n·p + distance = 0 on the plane"
    )
    point: Optional[Vec3List] = Field(
        default=None, description="A point on the plane; takes precedence over distance"
    )


class FractureRequest(BaseModel):
    """Impact and material description for a fracture cascade."""

    point: Vec3List = Field(..., description="Impact point in mesh coordinates")
    energy: float = Field(..., ge=0.0, description="Energy delivered by the impact")
    mass: float = Field(default=1.0, gt=0.0, description="Mass of the body")
    velocity: Vec3List = Field(default=[0.0, 0.0, 0.0], description="Linear velocity")
    angularVelocity: Vec3List = Field(default=[0.0, 0.0, 0.0], description="Angular velocity")
    drag: float = Field(default=0.0, ge=0.0, description="Linear drag")
    meanFaultDistance: float = Field(default=0.1, ge=0.0, description="Average distance between fault points")
    fractureEnergy: float = Field(default=10.0, ge=0.0, description="Energy per unit area required to fracture")
    surfaceEnergy: float = Field(default=0.0, ge=0.0, description="Energy per unit area released by fracturing")
    fragmentMinMass: float = Field(default=0.1, ge=0.0, description="Fragments lighter than this stop fracturing")
    minFractureRadius: float = Field(
        default=0.0, ge=0.0, description="Impacts unable to bisect a sphere of this radius are ignored"
    )
    seed: Optional[int] = Field(default=None, description="Seed for reproducible cascades")


class CollisionEnergyRequest(BaseModel):
    """Collision description reported by a physics engine."""

    mass: float = Field(..., gt=0.0, description="Mass of the body")
    otherMass: Optional[float] = Field(
        default=None, gt=0.0, description="Mass of the other body; omitted for static colliders"
    )
    relativeVelocity: Vec3List = Field(default=[0.0, 0.0, 0.0], description="Relative velocity at impact")
    impulse: Vec3List = Field(default=[0.0, 0.0, 0.0], description="Impulse exchanged by the collision")


class MeshBBox(BaseModel):
    """Axis‑aligned bounding box for a mesh."""

    min: List[float] = Field(..., description="Minimum x, y, z coordinates of the mesh")
    max: List[float] = Field(..., description="Maximum x, y, z coordinates of the mesh")


class MeshInfo(BaseModel):
    """Summary information about a stored mesh."""

    meshId: str = Field(..., description="Unique identifier for the mesh")
    name: str = Field(..., description="Display name")
    source: str = Field(..., description="How the mesh was produced (import, primitive, split, fracture)")
    parentId: Optional[str] = Field(default=None, description="Mesh this one was cut from")
    vertexCount: int = Field(..., description="Number of stored vertices")
    loopCount: int = Field(..., description="Number of polygon loops")
    triangleCount: int = Field(..., description="Number of render triangles")
    bbox: MeshBBox = Field(..., description="Bounding box around the mesh")
    createdAt: Any = Field(..., description="Timestamp of when the mesh was stored")


class MeshResponse(BaseModel):
    """Render buffers and polygon loops of a stored mesh."""

    meshId: str = Field(..., description="Identifier of the mesh")
    vertices: List[float] = Field(..., description="Flat list of vertex positions (x, y, z …)")
    normals: List[float] = Field(..., description="Flat list of vertex normals (x, y, z …)")
    uvs: List[float] = Field(..., description="Flat list of texture coordinates (u, v …)")
    indices: List[int] = Field(..., description="Index buffer defining the render triangles")
    loops: List[int] = Field(..., description="Polygon loops, each terminated by -1")
    bbox: MeshBBox = Field(..., description="Bounding box around the mesh")


class SplitResponse(BaseModel):
    """The two halves produced by a plane split."""

    below: MeshInfo = Field(..., description="Part on the negative side of the plane")
    above: MeshInfo = Field(..., description="Part on the positive side of the plane")


class FragmentInfo(BaseModel):
    """One fragment produced by a fracture cascade."""

    mesh: MeshInfo = Field(..., description="Stored mesh of the fragment")
    mass: float = Field(..., description="Mass assigned to the fragment")
    velocity: Vec3List = Field(..., description="Linear velocity")
    angularVelocity: Vec3List = Field(..., description="Angular velocity")
    fractureEnabled: bool = Field(..., description="Whether the fragment may fracture further")


class FractureResponse(BaseModel):
    """Result of a fracture cascade."""

    meshId: str = Field(..., description="Identifier of the fractured mesh")
    fragments: List[FragmentInfo] = Field(
        ..., description="All fragments, the original body first and created fragments after"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Cascade statistics (splits, failed splits, steps)"
    )


class CollisionEnergyResponse(BaseModel):
    """Energies derived from a collision."""

    energy: float = Field(..., description="Kinetic energy available in the collision")
    energyLoss: float = Field(..., description="Energy lost according to the exchanged impulse")
