# techmarket/schemas/ai.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from techmarket.schemas.order import GeoPoint


class ChatPart(BaseModel):
    text: str = ""


class ChatTurn(BaseModel):
    """Either {"role", "content"} or the widget's {"role", "parts": [{"text"}]}."""
    role: str
    content: Optional[str] = None
    parts: Optional[List[ChatPart]] = None

    def text(self) -> str:
        if self.content is not None:
            return self.content
        return "".join(p.text for p in self.parts or [])


class ChatRequest(BaseModel):
    message: str
    history: Optional[List[ChatTurn]] = None


class ChatResponse(BaseModel):
    response: str


class SummaryRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_title: str = ""
    product_description: str = ""


class SummaryResponse(BaseModel):
    summary: str


class MapsSearchRequest(BaseModel):
    query: str
    location: Optional[GeoPoint] = None


class MapsSearchResponse(BaseModel):
    text: str
    groundingChunks: List[Dict[str, Any]] = []


class ImageRequest(BaseModel):
    prompt: str
    size: Optional[str] = "1K"         # 1K | 2K | 4K


class ImageResponse(BaseModel):
    imageUrl: str


class VideoRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_base64: str
    prompt: Optional[str] = None
    aspect_ratio: Optional[str] = "16:9"


class VideoResponse(BaseModel):
    videoBase64: str
