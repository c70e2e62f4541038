from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from dotenv import load_dotenv

from db import Base, engine
from prediction.models import College  # noqa: F401  (registers the table)
from prediction.routes import router as prediction_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="NEET Rank & College Predictor",
    description="Rank estimation and college admission chances from NEET scores",
    version="1.0.0",
)

cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(prediction_router)


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info("App starting, college catalog table ready")


@app.get("/")
def root():
    return {"status": "ok", "service": "neet-predictor"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
