import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guardops.application import configure_services
from guardops.core.rules import ComplianceRules, load_rules
from guardops.routes import compliance, payroll


def create_app() -> FastAPI:
    logging.basicConfig(
        level=os.getenv("GUARDOPS_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="GuardOps Payroll & Compliance API", version="0.1.0")

    rules = load_rules()
    weight_policy = os.getenv("GUARDOPS_WEIGHT_POLICY")
    if weight_policy:
        rules.compliance = ComplianceRules(**{**rules.compliance.model_dump(), "weight_policy": weight_policy})
    configure_services(rules)

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(payroll.router, prefix="/api")
    app.include_router(compliance.router, prefix="/api")

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok", "rule_version": rules.payroll.rule_version}

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        return JSONResponse({"service": app.title, "docs": "/docs", "health": "/api/health"})

    return app


app = create_app()
