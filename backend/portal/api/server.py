from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api.endpoints import upload
from portal.core.config import get_settings
from portal.core.logging_config import setup_logging

settings = get_settings()
setup_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def health_check():
    return {"status": "online", "service": settings.APP_NAME}

app.include_router(upload.router, prefix="/api", tags=["Upload"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
