from fastapi import FastAPI

from dotenv import load_dotenv
load_dotenv()

from app.core.logging import configure_logging
from app.core.settings import settings
from app.api.auth_routes import router as auth_router
from app.api.quiz_routes import router as quiz_router
from app.api.certificate_routes import router as certificate_router
from app.api.transcript_routes import router as transcript_router

configure_logging(settings.log_level)

app = FastAPI(
    title="CertifyTube Quiz Service",
    version="1.0.0",
    description="Video quizzes generated with Gemini and verifiable completion certificates",
)

# Routers
app.include_router(auth_router)
app.include_router(quiz_router)
app.include_router(certificate_router)
app.include_router(transcript_router)


@app.get("/health")
def health():
    return {"status": "ok"}
