import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import actions, advisor, auth, budgets, goals, transactions
from app.core.config import CORS_ORIGINS, LOG_LEVEL
from app.core.errors import AllocationExceededError, BudgetServiceError
from app.database import create_db_and_tables

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield

app = FastAPI(title="Budget Allocation API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AllocationExceededError)
async def allocation_exceeded_handler(request: Request, exc: AllocationExceededError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "exceeded_by": round(exc.exceeded_by, 2),
            "remaining": round(exc.remaining, 2),
        },
    )

@app.exception_handler(BudgetServiceError)
async def budget_service_error_handler(request: Request, exc: BudgetServiceError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

app.include_router(auth.router)
app.include_router(transactions.router)
app.include_router(goals.router)
app.include_router(budgets.router)
app.include_router(actions.router)
app.include_router(advisor.router)

@app.get("/")
def root():
    return {"message": "Budget allocation server"}
