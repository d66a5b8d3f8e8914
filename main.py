from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from splitease.apis.routes.session_routes import router as session_router
from splitease.apis.routes.member_routes import router as member_router
from splitease.apis.routes.expense_routes import router as expense_router
from splitease.apis.routes.settlement_routes import router as settlement_router
from splitease.utils.logger import get_logger
from splitease.utils.settings import get_settings


logger = get_logger(__name__)
settings = get_settings()

app = FastAPI(title="SplitEase Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


app.include_router(session_router, prefix="/api")
app.include_router(member_router, prefix="/api")
app.include_router(expense_router, prefix="/api")
app.include_router(settlement_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting {settings.APP_NAME} server...")
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )
