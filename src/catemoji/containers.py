"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from catemoji.adapters.anthropic_caption_client import HttpxAnthropicCaptionClient
from catemoji.adapters.image_fetcher import HttpxImageFetcher
from catemoji.adapters.openai_caption_client import OpenAICaptionClient
from catemoji.adapters.opencv_camera import OpenCVCamera
from catemoji.config import Settings, caption_credentials
from catemoji.services.captions import CaptionService
from catemoji.services.classifier import RandomExpressionClassifier
from catemoji.services.compositor import MemeCompositor
from catemoji.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    caption_service: CaptionService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    caption_client = _build_caption_client(resolved_settings)
    caption_service = CaptionService(
        client=caption_client,
        max_tokens=resolved_settings.caption_max_tokens,
    )
    image_fetcher = HttpxImageFetcher.create()
    camera = OpenCVCamera(device=resolved_settings.camera_device)
    session_service = SessionService(
        classifier=RandomExpressionClassifier(
            delay_seconds=resolved_settings.classifier_delay_seconds
        ),
        caption_service=caption_service,
        compositor=MemeCompositor(fetcher=image_fetcher),
        camera=camera,
    )

    async def close_resources() -> None:
        session_service.restart()
        await image_fetcher.close()
        if caption_client is not None:
            await caption_client.close()

    return AppContainer(
        settings=resolved_settings,
        caption_service=caption_service,
        session_service=session_service,
        close_resources=close_resources,
    )


def _build_caption_client(
    settings: Settings,
) -> HttpxAnthropicCaptionClient | OpenAICaptionClient | None:
    api_key = caption_credentials(settings)
    if api_key is None:
        return None
    if settings.caption_backend == "openai":
        return OpenAICaptionClient.create(api_key=api_key, model=settings.openai_model)
    return HttpxAnthropicCaptionClient.create(
        api_key=api_key,
        model=settings.anthropic_model,
        base_url=settings.anthropic_base_url,
    )
