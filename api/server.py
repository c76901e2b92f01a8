"""FastAPI server for StyleFit Virtual Try-On.

Serves a single browser page and a small JSON API:
- upload a photo of the user and one or two clothing images
- run the try-on through the Gemini image model
- iteratively edit the result with free-text instructions
- download the current result
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, File, HTTPException, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pydantic import BaseModel

from stylefit import __version__
from stylefit.config import AppConfig, load_config
from stylefit.errors import ValidationError
from stylefit.logging_setup import setup_logging
from stylefit.models import EncodedImage, ImageSlot, SessionStatus, TryOnSession
from stylefit.pipeline import SessionController
from stylefit.services import GeminiTryOnClient

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load config and build the session controller at startup.
    
    A missing API key raises here, so the server refuses to start.
    """
    config = load_config()
    setup_logging(config.log_level)
    
    translator = GeminiTryOnClient.from_api_key(config.gemini_api_key, config.model.name)
    app.state.config = config
    app.state.controller = SessionController(translator)
    logger.info("StyleFit ready (model: %s)", config.model.name)
    yield


app = FastAPI(
    title="StyleFit API",
    description="Virtual try-on using the Gemini image model",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ImageView(BaseModel):
    """An image as the page displays it."""
    data_url: str
    mime_type: str
    filename: str | None = None


class SessionView(BaseModel):
    """Session state returned to the browser."""
    session_id: str
    status: SessionStatus
    is_generating: bool
    is_editing: bool
    can_generate: bool
    can_refine: bool
    error: str | None = None
    commentary: str | None = None
    subject: ImageView | None = None
    garment_1: ImageView | None = None
    garment_2: ImageView | None = None
    result: ImageView | None = None
    
    @classmethod
    def from_session(cls, session: TryOnSession) -> "SessionView":
        def view(image: EncodedImage | None) -> ImageView | None:
            if image is None:
                return None
            return ImageView(
                data_url=image.to_data_url(),
                mime_type=image.mime_type,
                filename=image.filename,
            )
        
        return cls(
            session_id=session.session_id,
            status=session.status,
            is_generating=session.status == SessionStatus.GENERATING,
            is_editing=session.status == SessionStatus.EDITING,
            can_generate=session.can_generate,
            can_refine=session.can_refine,
            error=session.error,
            commentary=session.commentary,
            subject=view(session.subject),
            garment_1=view(session.garment_1),
            garment_2=view(session.garment_2),
            result=view(session.result),
        )


class RefineRequest(BaseModel):
    """Request body for a follow-up edit."""
    instruction: str


def get_controller(request: Request) -> SessionController:
    """Get the controller built at startup."""
    return request.app.state.controller


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def _busy(controller: SessionController) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail=f"Another request is still {controller.session.status.value}.",
    )


@app.get("/")
async def index():
    """Serve the try-on page."""
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "StyleFit Virtual Try-On", "version": __version__}


@app.get("/api/session", response_model=SessionView)
async def get_session(controller: SessionController = Depends(get_controller)):
    """Current session state."""
    return SessionView.from_session(controller.session)


@app.put("/api/images/{slot}", response_model=SessionView)
async def upload_image(
    slot: ImageSlot,
    file: UploadFile = File(...),
    controller: SessionController = Depends(get_controller),
    config: AppConfig = Depends(get_config),
):
    """Store an uploaded image in the given slot.
    
    Args:
        slot: subject, garment_1 or garment_2
        file: Multipart image file
        
    Returns:
        Updated session state; 400 if the file is not an image
    """
    if file.size is not None and file.size > config.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Image is too large (limit is {config.max_upload_mb} MB).",
        )
    
    data = await file.read()
    try:
        image = EncodedImage.from_upload(
            data,
            file.content_type,
            filename=file.filename,
            max_bytes=config.max_upload_bytes,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    
    session = controller.set_image(slot, image)
    return SessionView.from_session(session)


@app.delete("/api/images/{slot}", response_model=SessionView)
async def clear_image(slot: ImageSlot, controller: SessionController = Depends(get_controller)):
    """Remove the image from a slot."""
    return SessionView.from_session(controller.clear_image(slot))


@app.post("/api/tryon", response_model=SessionView)
async def generate_tryon(controller: SessionController = Depends(get_controller)):
    """Generate a virtual try-on image from the uploaded photos.
    
    Validation and model errors are reported in the session's ``error``
    field, not as HTTP errors. Returns 409 while another request runs.
    """
    if not await controller.generate():
        raise _busy(controller)
    return SessionView.from_session(controller.session)


@app.post("/api/refine", response_model=SessionView)
async def refine_tryon(
    request: RefineRequest,
    controller: SessionController = Depends(get_controller),
):
    """Edit the current result with a free-text instruction."""
    if not await controller.refine(request.instruction):
        raise _busy(controller)
    return SessionView.from_session(controller.session)


@app.post("/api/reset", response_model=SessionView)
async def reset_session(controller: SessionController = Depends(get_controller)):
    """Start over with an empty session."""
    return SessionView.from_session(controller.reset())


@app.get("/api/result/download")
async def download_result(
    controller: SessionController = Depends(get_controller),
    config: AppConfig = Depends(get_config),
):
    """Offer the current result as a file download."""
    result = controller.session.result
    if result is None:
        raise HTTPException(status_code=404, detail="No generated image to download.")
    
    return Response(
        content=result.data,
        media_type=result.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{config.download_filename}"'},
    )


def main():
    """Run the server with uvicorn."""
    import uvicorn
    
    config = AppConfig()
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
