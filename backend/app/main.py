from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.exceptions import register_exception_handlers
from app.startup import configure_logging, run_startup_checks

# ========== Loyalty & Rewards ==========
from modules.loyalty.routes.ledger_routes import router as rewards_router
from modules.loyalty.services.audit_sink import shutdown_audit_sink

# ========== Kitchen Display System (KDS) ==========
from modules.kds.routes.kds_routes import router as kds_router

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title="Restaurant Loyalty & Kitchen Routing API",
    description="""
    Token rewards ledger and kitchen station routing for restaurant ordering.

    ## Features

    * **Loyalty Ledger** - Earn tokens on completed orders, redeem them for rewards,
      tiered membership (Bronze, Silver, Gold, Platinum) and leaderboards
    * **Kitchen Station Routing** - Keyword-based auto-assignment of orders to kitchen
      stations, manual overrides and per-station load statistics
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rewards_router)
app.include_router(kds_router)


@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup"""
    run_startup_checks()


@app.on_event("shutdown")
async def shutdown_event():
    """Flush pending audit deliveries"""
    shutdown_audit_sink()


@app.get("/")
def read_root():
    return {"message": "Loyalty & kitchen routing backend is running"}
