from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Largest canvas side the stroke generator accepts; cost grows with area
MAX_CANVAS_SIDE = 1200


class StrokePoint(BaseModel):
    x: float
    y: float
    timestamp: float  # Replay time, not wall-clock accurate for generated strokes


class DrawingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    twitter_handle: Optional[str] = Field(default=None, alias="twitterHandle")
    points: List[StrokePoint]
    canvas_width: float = Field(alias="canvasWidth")
    canvas_height: float = Field(alias="canvasHeight")


class Drawing(DrawingCreate):
    id: str
    creation_time: float = Field(alias="creationTime")  # epoch ms


class DrawingPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: List[Drawing]
    is_done: bool = Field(alias="isDone")
    continue_cursor: str = Field(alias="continueCursor")


class StrokeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: str = Field(alias="imageData")  # data URL or bare base64
    canvas_width: int = Field(default=600, alias="canvasWidth", gt=0, le=MAX_CANVAS_SIDE)
    canvas_height: int = Field(default=400, alias="canvasHeight", gt=0, le=MAX_CANVAS_SIDE)


class StrokeResponse(BaseModel):
    points: List[StrokePoint]
    count: int
