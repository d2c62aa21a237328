# techmarket/routes/ai.py

from fastapi import APIRouter, HTTPException, Request, status
from techmarket.schemas.ai import (
    ChatRequest, ChatResponse,
    SummaryRequest, SummaryResponse,
    MapsSearchRequest, MapsSearchResponse,
    ImageRequest, ImageResponse,
    VideoRequest, VideoResponse,
)
from techmarket.services import ai

router = APIRouter()


async def server_error(request: Request, message: str, e: Exception, data: dict | None = None) -> HTTPException:
    await request.app.state.log.log_error("ai", f"{message}: {str(e)}", data)
    return HTTPException(status_code=500, detail=message)


# ────────────── CHAT ──────────────
@router.post(
    "/chat",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Support chat",
    responses={500: {"description": "Failed to generate response"}},
)
async def chat(request: Request, payload: ChatRequest):
    try:
        text = await ai.chat(payload.message, payload.history)
    except Exception as e:
        raise await server_error(request, "Failed to generate response", e)
    await request.app.state.log.log_info("ai", "Chat answered", {"turns": len(payload.history or [])})
    return {"response": text}


# ────────────── QUICK SUMMARY ──────────────
@router.post(
    "/quick-summary",
    response_model=SummaryResponse,
    summary="One-line sales summary of a product",
    responses={500: {"description": "Failed to generate summary"}},
)
async def quick_summary(request: Request, payload: SummaryRequest):
    try:
        summary = await ai.quick_summary(payload.product_title, payload.product_description)
    except Exception as e:
        raise await server_error(request, "Failed to generate summary", e, {"title": payload.product_title})
    return {"summary": summary}


# ────────────── MAPS SEARCH ──────────────
@router.post(
    "/maps-search",
    response_model=MapsSearchResponse,
    summary="Location-grounded store search",
    responses={500: {"description": "Failed to search maps"}},
)
async def maps_search(request: Request, payload: MapsSearchRequest):
    try:
        result = await ai.maps_search(payload.query, payload.location)
    except Exception as e:
        raise await server_error(request, "Failed to search maps", e, {"query": payload.query})
    await request.app.state.log.log_info(
        "ai", "Maps search answered", {"sources": len(result["groundingChunks"])}
    )
    return result


# ────────────── IMAGE ──────────────
@router.post(
    "/generate-image",
    response_model=ImageResponse,
    summary="Generate a product image",
    responses={500: {"description": "Failed to generate image, or no image returned"}},
)
async def generate_image(request: Request, payload: ImageRequest):
    try:
        image_url = await ai.generate_image(payload.prompt, payload.size)
    except Exception as e:
        raise await server_error(request, "Failed to generate image", e, {"size": payload.size})
    if not image_url:
        await request.app.state.log.log_error("ai", "No image generated", {"prompt": payload.prompt})
        raise HTTPException(status_code=500, detail="No image generated")
    return {"imageUrl": image_url}


# ────────────── VIDEO ──────────────
@router.post(
    "/generate-video",
    response_model=VideoResponse,
    summary="Animate a product image",
    response_description="MP4 as a data URL",
    responses={500: {"description": "Video generation failed or timed out"}},
)
async def generate_video(request: Request, payload: VideoRequest):
    """
    Holds the request open while the video job runs
    (up to VIDEO_POLL_INTERVAL * VIDEO_POLL_ATTEMPTS seconds).
    """
    try:
        video = await ai.generate_video(payload.image_base64, payload.prompt, payload.aspect_ratio)
    except Exception as e:
        raise await server_error(request, "Failed to generate video", e)
    if not video:
        await request.app.state.log.log_error("ai", "Video generation timed out or failed")
        raise HTTPException(status_code=500, detail="Video generation timed out or failed")
    return {"videoBase64": video}
