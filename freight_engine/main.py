from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from freight_engine.config import configure_logging
from freight_engine.routers.rates import router as rates_router
from freight_engine.routers.tracking import router as tracking_router

configure_logging()

app = FastAPI(title="Freight Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tracking_router)
app.include_router(rates_router)

@app.get("/")
async def root():
    return {"status": "ONLINE", "engine": "Freight V1"}
