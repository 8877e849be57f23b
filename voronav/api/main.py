"""FastAPI main application."""

from typing import Dict, List, Optional, Tuple

import structlog
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.navigation import RecordingDispatcher, RecordingLabelSink
from ..core.palette import to_hex
from ..core.scene import FrameResult, Scene, create_scene
from ..logging_setup import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

app = FastAPI(
    title="Voronav API",
    description="Nearest-site navigation partition with hover tracking",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class PointerRequest(BaseModel):
    """Pointer position for one frame; omit both fields for no pointer."""

    x: Optional[float] = Field(None, description="Pointer x")
    y: Optional[float] = Field(None, description="Pointer y")


class ResizeRequest(BaseModel):
    """New viewport size."""

    width: float = Field(..., ge=0, allow_inf_nan=False, description="Viewport width")
    height: float = Field(..., ge=0, allow_inf_nan=False, description="Viewport height")


class ActivateRequest(BaseModel):
    """Press or tap at a point."""

    x: float = Field(..., description="Pointer x")
    y: float = Field(..., description="Pointer y")
    now: float = Field(0.0, description="Clock reading in seconds")


class TickRequest(BaseModel):
    """Hold timer advance."""

    now: float = Field(..., description="Clock reading in seconds")
    x: Optional[float] = Field(None, description="Pointer x")
    y: Optional[float] = Field(None, description="Pointer y")


class SiteInfo(BaseModel):
    index: int
    x: float
    y: float


class CentroidInfo(BaseModel):
    index: int
    x: float
    y: float
    sample_count: int


class LabelInfo(BaseModel):
    index: int
    label: str
    target: Optional[str]


class SceneResponse(BaseModel):
    """Static layout of the scene."""

    width: float
    height: float
    resolution: float
    sample_stride: float
    sites: List[SiteInfo]
    labels: List[LabelInfo]
    centroids: List[CentroidInfo]
    colors: List[str]


class FrameResponse(BaseModel):
    """Result of one frame."""

    hovered: Optional[int]
    phase: float
    transition: str
    buckets: Dict[int, List[Tuple[float, float]]]
    edge_pixels: List[Tuple[float, float]]
    boundaries: List[Tuple[Tuple[float, float], Tuple[float, float]]]
    centroids: List[CentroidInfo]
    colors: List[str]


class ActivateResponse(BaseModel):
    """Activated region, if any."""

    region: Optional[int] = None
    label: Optional[str] = None
    target: Optional[str] = None


class TickResponse(BaseModel):
    recolored: List[int]
    colors: List[str]


def get_scene() -> Scene:
    """Scene held by the app, created from settings on first use."""
    scene = getattr(app.state, "scene", None)
    if scene is None:
        scene = create_scene(
            settings,
            label_sink=RecordingLabelSink(),
            dispatcher=RecordingDispatcher(),
        )
        app.state.scene = scene
    return scene


def centroid_infos(scene: Scene) -> List[CentroidInfo]:
    return [
        CentroidInfo(index=c.index, x=c.x, y=c.y, sample_count=c.sample_count)
        for c in scene.centroids
    ]


def frame_response(result: FrameResult) -> FrameResponse:
    return FrameResponse(
        hovered=result.hovered,
        phase=result.phase,
        transition=result.transition.value,
        buckets={i: [(s.x, s.y) for s in bucket] for i, bucket in enumerate(result.buckets)},
        edge_pixels=[(s.x, s.y) for s in result.edge_pixels],
        boundaries=[(seg.start, seg.end) for seg in result.boundaries],
        centroids=[
            CentroidInfo(index=c.index, x=c.x, y=c.y, sample_count=c.sample_count)
            for c in result.centroids
        ],
        colors=[to_hex(c) for c in result.colors],
    )


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Build the scene on startup."""
    logger.info("Starting Voronav API")
    get_scene()
    logger.info("API startup complete")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Voronav API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check(scene: Scene = Depends(get_scene)):
    """Health check endpoint."""
    return {"status": "healthy", "regions": scene.region_count}


@app.get("/scene", response_model=SceneResponse)
async def get_scene_layout(scene: Scene = Depends(get_scene)):
    """Sites, labels and label anchors."""
    return SceneResponse(
        width=scene.viewport.width,
        height=scene.viewport.height,
        resolution=scene.resolution,
        sample_stride=scene.sample_stride,
        sites=[SiteInfo(index=s.index, x=s.x, y=s.y) for s in scene.partition.sites],
        labels=[LabelInfo(index=lbl.index, label=lbl.label, target=lbl.target) for lbl in scene.labels],
        centroids=centroid_infos(scene),
        colors=[to_hex(c) for c in scene.colors],
    )


@app.post("/frame", response_model=FrameResponse)
async def run_frame(request: PointerRequest, scene: Scene = Depends(get_scene)):
    """Run one frame with the given pointer position."""
    pointer = None
    if request.x is not None and request.y is not None:
        pointer = (request.x, request.y)

    try:
        result = scene.frame(pointer)
    except RuntimeError as e:
        logger.error("Frame failed", error=str(e))
        raise HTTPException(status_code=409, detail=str(e))

    return frame_response(result)


@app.post("/resize", response_model=List[CentroidInfo])
async def resize(request: ResizeRequest, scene: Scene = Depends(get_scene)):
    """Resize the viewport and return the new label anchors."""
    try:
        scene.resize(request.width, request.height)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        logger.error("Resize failed", error=str(e))
        raise HTTPException(status_code=409, detail=str(e))

    return centroid_infos(scene)


@app.post("/leave")
async def leave(scene: Scene = Depends(get_scene)):
    """Pointer left the viewport."""
    transition = scene.leave()
    return {"transition": transition.value, "hovered": scene.hover.hovered}


@app.post("/activate", response_model=ActivateResponse)
async def activate(request: ActivateRequest, scene: Scene = Depends(get_scene)):
    """Press or tap; returns the navigation target that was dispatched."""
    label = scene.activate(request.x, request.y, request.now)
    if label is None:
        return ActivateResponse()
    return ActivateResponse(region=label.index, label=label.label, target=label.target)


@app.post("/release")
async def release(scene: Scene = Depends(get_scene)):
    """Pointer released."""
    return {"stopped": scene.release()}


@app.post("/tick", response_model=TickResponse)
async def tick(request: TickRequest, scene: Scene = Depends(get_scene)):
    """Advance the hold timer."""
    pointer = None
    if request.x is not None and request.y is not None:
        pointer = (request.x, request.y)

    recolored = scene.tick(request.now, pointer)
    return TickResponse(recolored=recolored, colors=[to_hex(c) for c in scene.colors])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
