from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from dataclasses import asdict
from typing import Optional
import asyncio
import logging
import traceback

from banner import (
    BannerComposer, BannerConfig, FontRegistry, CsvRowSource, HttpImageSource,
    MissingInputError, FetchError, DecodeError, LayoutError, FontNotRegisteredError,
)
from banner.presets import get_preset_options, DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_MAIN_TEXT, DEFAULT_OPTIONS
from banner.api_models import BannerQuery, BannerOptionsResponse

# Logging setup
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    font_family: str = "default"
    font_path: Optional[str] = None  # TrueType file; system fonts are tried when unset
    heading_text: str = "Options"
    default_overlay_url: Optional[str] = "https://placehold.co/600x600.png"
    fetch_timeout: float = 30.0
    max_concurrent_renders: int = 4  # Each render holds a full width x height buffer

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
app = FastAPI(title="Banner Renderer", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Fonts are registered once per process, before any request is served
font_registry = FontRegistry()
font_registry.register(settings.font_family, settings.font_path)

# Initialize services
banner_config = BannerConfig(font_family=settings.font_family, heading_text=settings.heading_text)
composer = BannerComposer(banner_config, font_registry)
row_source = CsvRowSource(timeout=settings.fetch_timeout)
image_source = HttpImageSource(timeout=settings.fetch_timeout)
render_slots = asyncio.Semaphore(settings.max_concurrent_renders)


def get_composer() -> BannerComposer:
    return composer

def get_row_source() -> CsvRowSource:
    return row_source

def get_image_source() -> HttpImageSource:
    return image_source


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "banner-renderer"}

@app.get("/")
async def root():
    return {
        "service": "Banner Renderer",
        "version": "1.0.0",
        "description": "Promotional banners with auto-fitted text, rendered to PNG",
        "endpoints": ["/banner", "/banner/options", "/config", "/health"],
    }

@app.get("/config")
async def get_config():
    """Get current rendering configuration."""
    return {
        "font_family": settings.font_family,
        "font_registered": font_registry.is_registered(settings.font_family),
        "max_concurrent_renders": settings.max_concurrent_renders,
        "fetch_timeout": settings.fetch_timeout,
        "layout": asdict(banner_config),
    }


# ==================== BANNER ENDPOINTS ====================

@app.get("/banner/options", response_model=BannerOptionsResponse)
async def get_banner_options():
    """
    Get available presets and the defaults applied to unset parameters.
    """
    return BannerOptionsResponse(
        presets=get_preset_options(),
        defaults={
            "width": DEFAULT_WIDTH,
            "height": DEFAULT_HEIGHT,
            "mainText": DEFAULT_MAIN_TEXT,
            "options": list(DEFAULT_OPTIONS),
            "imgUrl": settings.default_overlay_url,
            **BannerQuery().model_dump(
                by_alias=True,
                include={"bg_color", "text_color", "option_color", "stroke_style", "line_width", "scale_factor"}
            ),
        },
    )

@app.get("/banner")
async def generate_banner(
    request: Request,
    banner_composer: BannerComposer = Depends(get_composer),
    rows: CsvRowSource = Depends(get_row_source),
    images: HttpImageSource = Depends(get_image_source),
):
    """
    Generate a banner PNG.

    Workflow:
    1. Parse query parameters (csvUrl is required)
    2. Fetch the first CSV row and any background/overlay images
    3. Compose the banner off the event loop, bounded by render_slots

    Returns:
        Generated banner as image/png
    """
    try:
        query = BannerQuery.model_validate(dict(request.query_params))
        csv_url = query.require_csv_url()

        logger.info(f"Generating banner from CSV: {csv_url[:80]}")

        # All I/O completes before composition starts
        row = await rows.fetch_first_row(csv_url)
        background = await images.fetch(query.bg_url) if query.bg_url else None
        overlay_url = query.img_url or settings.default_overlay_url
        overlay = await images.fetch(overlay_url) if overlay_url else None

        banner_request = query.to_request(row, background, overlay)

        async with render_slots:
            png = await run_in_threadpool(banner_composer.compose, banner_request)

        logger.info(f"Banner generated: {banner_request.width}x{banner_request.height}, {len(png)} bytes")
        return Response(content=png, media_type="image/png")

    except ValidationError as e:
        logger.error(f"Invalid banner parameters: {e}")
        raise HTTPException(status_code=422, detail=f"Invalid banner parameters: {e}")
    except (MissingInputError, ValueError) as e:
        logger.error(f"Bad banner request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        logger.error(f"Fetch error: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except DecodeError as e:
        logger.error(f"Decode error: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except (LayoutError, FontNotRegisteredError) as e:
        tb = traceback.format_exc()
        logger.error(f"Banner composition error: {e}")
        logger.error(f"Traceback:\n{tb}")
        raise HTTPException(status_code=500, detail=f"Banner composition failed: {e}")
