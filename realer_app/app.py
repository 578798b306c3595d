import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

import models.models  # noqa: F401
from core.auth_errors import ForcedLogoutError, ForcedLogoutHandler
from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import ValidationErrorHandler
from core.lifespan import lifespan
from core.settings import settings
from realtime.chat_routes import router as chat_router
from routes.auth_routes import router as auth_router
from routes.blog_routes import router as blog_router
from routes.bounty_routes import router as bounty_router
from routes.conversation_routes import router as conversation_router
from routes.liked_routes import router as liked_router
from routes.location_alert_routes import router as location_alert_router
from routes.notification_routes import router as notification_router
from routes.offer_routes import router as offer_router
from routes.profile_routes import router as profile_router
from routes.property_image_routes import router as property_image_router
from routes.property_routes import router as property_router
from routes.view_state_routes import router as view_state_router
from routes.waitlist_routes import router as waitlist_router

logging.basicConfig(level=logging.INFO)
app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version="1.0.0",
)

app.include_router(auth_router, prefix="/v1/auth")
app.include_router(profile_router, prefix="/v1/profile")
app.include_router(property_router, prefix="/v1")
app.include_router(property_image_router, prefix="/v1")
app.include_router(conversation_router, prefix="/v1")
app.include_router(chat_router, prefix="/v1")
app.include_router(waitlist_router, prefix="/v1")
app.include_router(bounty_router, prefix="/v1")
app.include_router(notification_router, prefix="/v1")
app.include_router(offer_router, prefix="/v1")
app.include_router(liked_router, prefix="/v1")
app.include_router(location_alert_router, prefix="/v1")
app.include_router(blog_router, prefix="/v1")
app.include_router(view_state_router, prefix="/v1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "ok"}


app.add_exception_handler(
    RequestValidationError,
    ValidationErrorHandler(),
)
app.add_exception_handler(
    ForcedLogoutError,
    ForcedLogoutHandler(),
)

app.add_middleware(ErrorHandlerMiddleware)


if __name__ == "__main__":
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
