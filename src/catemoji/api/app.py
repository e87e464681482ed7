"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse

from catemoji.api.session_models import SessionView, session_view
from catemoji.api.ui import UI_HTML
from catemoji.app_logging import configure_logging
from catemoji.containers import AppContainer
from catemoji.domain.errors import AcquisitionError, CompositionError, PhaseError
from catemoji.services.sessions import SessionService


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app hosting the single meme session."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    def _session(request: Request) -> SessionService:
        state_container: AppContainer = request.app.state.container
        return state_container.session_service

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Single-page UI driving the meme flow."""
        return HTMLResponse(UI_HTML)

    @app.get("/session")
    async def get_session(request: Request) -> SessionView:
        """Return the current session state."""
        return session_view(_session(request).state)

    @app.post("/session/upload")
    async def upload(request: Request, wait: bool = False) -> SessionView:
        """Start a cycle with the raw image bytes in the request body."""
        service = _session(request)
        image_bytes = await request.body()
        try:
            task = service.submit_image(image_bytes)
        except PhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        if wait:
            await task
        return session_view(service.state)

    @app.post("/session/camera/start")
    async def start_camera(request: Request) -> SessionView:
        """Open the camera stream."""
        service = _session(request)
        try:
            await service.start_camera()
        except PhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except AcquisitionError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return session_view(service.state)

    @app.post("/session/camera/stop")
    async def stop_camera(request: Request) -> SessionView:
        """Release the camera stream without capturing."""
        service = _session(request)
        try:
            service.stop_camera()
        except PhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return session_view(service.state)

    @app.post("/session/camera/capture")
    async def capture(request: Request, wait: bool = False) -> SessionView:
        """Capture a frame and start a cycle with it."""
        service = _session(request)
        try:
            task = await service.capture()
        except PhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except AcquisitionError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        if wait:
            await task
        return session_view(service.state)

    @app.get("/session/download")
    async def download(request: Request) -> Response:
        """Render the completed meme as a PNG attachment."""
        service = _session(request)
        try:
            meme = await service.download()
        except PhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except CompositionError as exc:
            logger.exception("Failed to render meme")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return Response(
            content=meme.content,
            media_type=meme.media_type,
            headers={"Content-Disposition": f'attachment; filename="{meme.filename}"'},
        )

    @app.post("/session/restart")
    async def restart(request: Request) -> SessionView:
        """Clear the session and return to upload."""
        return session_view(_session(request).restart())

    return app
