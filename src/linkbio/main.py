from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.linkbio.api.v1.endpoints import users, profile, links
from src.linkbio.core.config import settings, logger
from src.linkbio.core.errors import ServerError

app = FastAPI(
    title="Link-in-Bio API",
    description="""
    Backend for a personal link-in-bio page.

    ## Features
    * Register, log in, refresh and log out with JWT-backed sessions
    * Password reset and email verification by email
    * Customize page theme, colors, fonts and gradients
    * Manage outbound links and track clicks

    ## Documentation
    * Swagger UI: [/docs](/docs)
    * ReDoc: [/redoc](/redoc)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/openapi.json",
    license_info={
        "name": "MIT",
    },
)

allowed_origins = settings.ALLOWED_ORIGINS.split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
app.include_router(profile.router, prefix="/api/v1/profile", tags=["profile"])
app.include_router(links.router, prefix="/api/v1/links", tags=["links"])


@app.exception_handler(ServerError)
async def server_error_handler(request: Request, exc: ServerError):
    logger.error(f"Server error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": exc.message}
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
    )


@app.get("/", tags=["root"])
async def root():
    return {
        "message": "Welcome to Link-in-Bio API",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
    }
