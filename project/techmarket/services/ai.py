# techmarket/services/ai.py

import asyncio
import base64
import re

from openai import AsyncOpenAI

from techmarket.config import settings
from techmarket.schemas.ai import ChatTurn
from techmarket.schemas.order import GeoPoint

CHAT_SYS_PROMPT = (
    "You are TechAssistant, a helpful AI support agent for TechMarket, an electronics "
    "e-commerce store. Answer questions about tech products, specs, and general advice. "
    "Be concise and professional."
)

SUMMARY_PROMPT = (
    "Provide a 1-sentence punchy sales summary for this product: {title}. "
    "Description: {description}. Focus on the main benefit."
)

DEFAULT_VIDEO_PROMPT = "Cinematic camera movement"

# size label from the client -> rendering quality of a square image
IMAGE_QUALITY = {"1K": "low", "2K": "medium", "4K": "high"}

VIDEO_SIZES = {"16:9": "1280x720", "9:16": "720x1280"}

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")

_client: AsyncOpenAI | None = None


def get_client() -> AsyncOpenAI:
    """OpenAI client, created on first use so the API boots without a key."""
    global _client
    if _client is None:
        _client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def history_to_messages(history: list[ChatTurn] | None) -> list[dict]:
    """Chat widget history -> chat completion messages ("model" is the assistant)."""
    messages = []
    for turn in history or []:
        role = "assistant" if turn.role in ("model", "assistant") else "user"
        messages.append({"role": role, "content": turn.text()})
    return messages


async def gpt_request(messages: list[dict], model: str = settings.OPENAI_CHAT_MODEL) -> str:
    """
    Async request to the chat completions API.
    """
    response = await get_client().chat.completions.create(
        model=model,
        messages=messages,
    )
    return response.choices[0].message.content


async def chat(message: str, history: list[ChatTurn] | None = None) -> str:
    messages = [{"role": "system", "content": CHAT_SYS_PROMPT}]
    messages += history_to_messages(history)
    messages.append({"role": "user", "content": message})
    return await gpt_request(messages)


async def quick_summary(title: str, description: str) -> str:
    prompt = SUMMARY_PROMPT.format(title=title, description=description)
    return await gpt_request(
        [{"role": "user", "content": prompt}],
        model=settings.OPENAI_SUMMARY_MODEL,
    )


def citations(response) -> list[dict]:
    """
    URL citations of a responses-API answer, shaped as grounding chunks
    ({"web": {"uri", "title"}}), one per distinct URI.
    """
    chunks = []
    seen = set()
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in item.content or []:
            for ann in getattr(part, "annotations", None) or []:
                if getattr(ann, "type", None) != "url_citation" or ann.url in seen:
                    continue
                seen.add(ann.url)
                chunks.append({"web": {"uri": ann.url, "title": ann.title}})
    return chunks


async def maps_search(query: str, location: GeoPoint | None = None) -> dict:
    """
    Web-search-grounded answer about nearby stores.

    Returns:
        dict: {"text": answer, "groundingChunks": [...]}
    """
    kwargs = {}
    if location is not None:
        kwargs["instructions"] = (
            f"The user is located at latitude {location.latitude}, "
            f"longitude {location.longitude}. Prefer places close to them."
        )

    response = await get_client().responses.create(
        model=settings.OPENAI_SEARCH_MODEL,
        input=query,
        tools=[{"type": "web_search"}],
        **kwargs,
    )
    return {"text": response.output_text, "groundingChunks": citations(response)}


async def generate_image(prompt: str, size: str | None = "1K") -> str | None:
    """Square image as a PNG data URL, or None when the API returned no image."""
    result = await get_client().images.generate(
        model=settings.OPENAI_IMAGE_MODEL,
        prompt=prompt,
        size="1024x1024",
        quality=IMAGE_QUALITY.get(size or "1K", "low"),
        n=1,
    )
    for image in result.data or []:
        if image.b64_json:
            return f"data:image/png;base64,{image.b64_json}"
    return None


async def generate_video(image_base64: str, prompt: str | None = None, aspect_ratio: str | None = "16:9") -> str | None:
    """
    Starts an image-referenced video job and polls it.

    Polling sleeps VIDEO_POLL_INTERVAL seconds between checks, at most
    VIDEO_POLL_ATTEMPTS times. Returns an MP4 data URL, or None when the
    job failed or did not finish in time.
    """
    client = get_client()
    image_bytes = base64.b64decode(DATA_URL_PREFIX.sub("", image_base64))

    video = await client.videos.create(
        model=settings.OPENAI_VIDEO_MODEL,
        prompt=prompt or DEFAULT_VIDEO_PROMPT,
        input_reference=("reference.png", image_bytes, "image/png"),
        size=VIDEO_SIZES.get(aspect_ratio or "16:9", VIDEO_SIZES["16:9"]),
    )

    attempts = 0
    while video.status not in ("completed", "failed") and attempts < settings.VIDEO_POLL_ATTEMPTS:
        await asyncio.sleep(settings.VIDEO_POLL_INTERVAL)
        video = await client.videos.retrieve(video.id)
        attempts += 1

    if video.status != "completed":
        return None

    content = await client.videos.download_content(video.id, variant="video")
    return "data:video/mp4;base64," + base64.b64encode(content.content).decode()
