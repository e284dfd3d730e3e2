from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from spinbook.application.exceptions import ConfigurationError
from spinbook.application.use_cases.check_configuration import (
    CheckConfigurationUseCase,
    configuration_error_report,
)
from spinbook.application.utils.studio_config import load_studio_config
from spinbook.core.config import Settings, get_settings
from spinbook.wiring.dependencies import build_calendar, get_http_client

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/test-config")
async def test_config(
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    """Check credentials, calendar access and Telegram settings without booking anything."""
    try:
        config = load_studio_config(settings)
    except ConfigurationError as e:
        logger.error("Configuration validation failed", extra={"error_kind": e.kind.value, "reason": e.detail})
        report = configuration_error_report(e.kind, e.detail)
    else:
        uc = CheckConfigurationUseCase(calendar=build_calendar(config, settings, http), config=config)
        report = await uc.execute()
    return JSONResponse(status_code=200 if report.ok else 500, content=report.body)
