import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spinbook.api.admin import router as admin_router
from spinbook.api.bookings import router as bookings_router
from spinbook.api.diagnostics import router as diagnostics_router
from spinbook.api.errors import register_error_handlers
from spinbook.core.config import get_settings

settings = get_settings()


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "date", "slots", "error_kind", "reason", "event_id"):
            value = getattr(record, key, None)
            if value not in (None, "", []):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="SpinBook", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

register_error_handlers(app, include_debug=not settings.is_production)

app.include_router(bookings_router, prefix="/api", tags=["bookings"])
app.include_router(diagnostics_router, prefix="/api", tags=["diagnostics"])
app.include_router(admin_router, prefix="/api/admin", tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
