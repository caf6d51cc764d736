import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from classnote.config import Config
from classnote.database import build_engine, build_sessionmaker, init_db
from classnote.errors import ConflictError, GenerationError
from classnote.gemini_client import GeminiClient
from classnote.routes import auth, students, materials, records, evaluations, dashboard
from classnote.services.evaluation_service import EvaluationGenerator
from classnote.timetable import load_fallback_timetable

logger = logging.getLogger(__name__)

def _error_summary(exc: RequestValidationError) -> list:
    # Client input is never echoed back, it may not even be encodable
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Init DB
    await init_db(app.state.engine)
    yield
    # Shutdown
    await app.state.engine.dispose()

def create_app(config=Config) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL)

    app = FastAPI(title="Classnote Backend", lifespan=lifespan)

    # Services live on app.state and reach handlers through dependencies
    app.state.config = config
    app.state.engine = build_engine(config.DATABASE_URL)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)
    app.state.evaluator = EvaluationGenerator(GeminiClient(config.GEMINI_API_KEY, config.GEMINI_MODEL))
    app.state.fallback_timetable = load_fallback_timetable(config.TIMETABLE_FALLBACK_FILE)

    origins = [
        config.FRONTEND_URL,
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    def with_cors(request: Request, response: JSONResponse) -> JSONResponse:
        # Error responses bypass CORSMiddleware, re-add the headers manually
        origin = request.headers.get("origin")
        if origin in origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "필수 정보가 누락되었거나 형식이 올바르지 않습니다.", "errors": _error_summary(exc)},
        )

    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(GenerationError)
    async def generation_exception_handler(request: Request, exc: GenerationError):
        logger.error(f"Evaluation generation failed: {exc}", exc_info=True)
        return with_cors(request, JSONResponse(
            status_code=500,
            content={"detail": "AI 평어 생성 중 오류가 발생했습니다."},
        ))

    # Global Exception Handler, no internal detail leaves the server
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global Exception: {exc}", exc_info=True)
        return with_cors(request, JSONResponse(
            status_code=500,
            content={"detail": "서버 오류가 발생했습니다."},
        ))

    # 1. Proxy & Session Middleware
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.SECRET_KEY,
        max_age=3600 * 24 * 7, # 7 Days
        https_only=config.ENV == "PRODUCTION",
        same_site="lax",
    )

    # 2. CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True, # Allow Cookies
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 3. Routes
    app.include_router(auth.router, prefix="/api", tags=["Auth"])
    app.include_router(students.router, prefix="/api/students", tags=["Students"])
    app.include_router(materials.router, prefix="/api/weekly-materials", tags=["Weekly Materials"])
    app.include_router(records.router, prefix="/api/learning-records", tags=["Learning Records"])
    app.include_router(evaluations.router, prefix="/api/evaluations", tags=["Evaluations"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])

    @app.get("/")
    def root():
        return {"message": "Classnote Backend Online"}

    return app

app = create_app()
